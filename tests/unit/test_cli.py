"""Unit tests for the bookmark-ai command-line interface."""

from pathlib import Path
from unittest.mock import patch

import pytest

from bookmark_ai import __version__
from bookmark_ai.cli import DEFAULT_PORT, create_parser, main
from bookmark_ai.db import BookmarkDB


class TestParser:
    def test_serve_defaults(self):
        args = create_parser().parse_args(["serve"])

        assert args.host == "127.0.0.1"
        assert args.port == DEFAULT_PORT
        assert args.reload is False

    def test_serve_options(self):
        args = create_parser().parse_args(["serve", "--host", "0.0.0.0", "-p", "9000", "--reload"])

        assert (args.host, args.port, args.reload) == ("0.0.0.0", 9000, True)

    def test_tree_requires_file(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["tree"])


class TestCommands:
    def test_version(self, capsys):
        assert main(["--version"]) == 0
        assert __version__ in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage:" in capsys.readouterr().out

    def test_serve_runs_uvicorn(self):
        with patch("uvicorn.run") as run:
            assert main(["serve", "--port", "9001"]) == 0

        run.assert_called_once_with(
            "api.main:app", host="127.0.0.1", port=9001, reload=False, log_level="info"
        )

    def test_serve_failure(self):
        with patch("uvicorn.run", side_effect=OSError("address in use")):
            assert main(["serve"]) == 1

    def test_init_db(self, tmp_path: Path, capsys):
        db_path = tmp_path / "cli.db"

        assert main(["init-db", "--db", str(db_path)]) == 0
        assert "Created database" in capsys.readouterr().out

        assert main(["init-db", "--db", str(db_path)]) == 0
        assert "Verified database" in capsys.readouterr().out
        assert BookmarkDB(db_path).exists()

    def test_tree_lists_candidates(self, tmp_path: Path, capsys):
        tree_file = tmp_path / "tree.yaml"
        tree_file.write_text("Firefox_Bookmarks:\n  Work:\n    Code_Reviews: []\nArchive: []\n")

        assert main(["tree", str(tree_file)]) == 0

        out = capsys.readouterr().out
        assert "Work/Code Reviews" in out
        assert "Archive" in out
        assert "Firefox" not in out

    def test_tree_invalid(self, tmp_path: Path, capsys):
        tree_file = tmp_path / "tree.yaml"
        tree_file.write_text("Work: 5\n")

        assert main(["tree", str(tree_file)]) == 1
        assert "Invalid category tree structure" in capsys.readouterr().out

    def test_tree_missing_file(self, tmp_path: Path):
        assert main(["tree", str(tmp_path / "nope.yaml")]) == 1
