"""Bookmark AI CLI - Command-line interface for running and maintaining the service.

Provides commands to start the API server, initialize the database, and
check a category tree file before uploading it.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import NoReturn

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from bookmark_ai.errors import BookmarkAIError

console = Console()
logger = logging.getLogger(__name__)

DEFAULT_PORT = 8787


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbose: If True, set DEBUG level; otherwise INFO.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )
    if not verbose:
        for name in ("httpx", "httpcore", "urllib3", "anthropic"):
            logging.getLogger(name).setLevel(logging.WARNING)


def cmd_version(args: argparse.Namespace) -> int:
    """Display version information."""
    from bookmark_ai import __version__

    console.print(f"Bookmark AI v{__version__}")
    return 0


def cmd_init_db(args: argparse.Namespace) -> int:
    """Create or migrate the database schema.

    Args:
        args: Parsed arguments with an optional database path.

    Returns:
        Exit code.
    """
    from bookmark_ai.db import BookmarkDB, get_db

    db = BookmarkDB(Path(args.db)) if args.db else get_db()
    try:
        created = db.init_schema()
        missing = db.verify_indices()["missing"]
    finally:
        db.close()

    action = "Created" if created else "Verified"
    console.print(f"[green]{action} database at {db.db_path}[/green]")
    if missing:
        console.print(f"[yellow]Missing indices: {', '.join(sorted(missing))}[/yellow]")
        return 1
    return 0


def cmd_tree(args: argparse.Namespace) -> int:
    """Validate a YAML/JSON category tree file and list its candidate paths.

    Args:
        args: Parsed arguments with the tree file path.

    Returns:
        Exit code (1 if the file is unreadable or not a valid tree).
    """
    from bookmark_ai.categories import flatten_categories, load_category_tree
    from bookmark_ai.config import get_config

    path = Path(args.file)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        console.print(f"[red]Cannot read {path}: {e}[/red]")
        return 1

    limits = get_config().categories
    try:
        tree = load_category_tree(text, max_depth=limits.max_depth, max_nodes=limits.max_nodes)
    except BookmarkAIError as e:
        console.print(f"[red]{e.message}[/red]")
        return 1

    paths = flatten_categories(tree)
    table = Table(title=f"Candidate categories ({len(paths)})")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Path", style="bold")
    for index, candidate in enumerate(paths, start=1):
        table.add_row(str(index), candidate)
    console.print(table)
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Start the API server.

    Args:
        args: Parsed arguments with host, port, and reload options.

    Returns:
        Exit code.
    """
    import uvicorn

    console.print(
        Panel(
            f"[bold green]Starting Bookmark AI API Server[/bold green]\n"
            f"Host: {args.host}\n"
            f"Port: {args.port}\n"
            f"Reload: {'Enabled' if args.reload else 'Disabled'}",
            title="API Server",
        )
    )

    try:
        uvicorn.run(
            "api.main:app",
            host=args.host,
            port=args.port,
            reload=args.reload,
            log_level="info",
        )
        return 0
    except Exception as e:
        console.print(f"[red]Error starting server: {e}[/red]")
        return 1


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands.

    Returns:
        Configured ArgumentParser.
    """
    parser = argparse.ArgumentParser(
        prog="bookmark-ai",
        description="Bookmark AI - classify bookmarks into your own category tree",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  bookmark-ai serve                   Start the API server on port 8787
  bookmark-ai serve --port 3000       Start server on custom port
  bookmark-ai init-db                 Create the database schema
  bookmark-ai tree categories.yaml    Check a tree file and list its paths
        """,
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version and exit",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Start the API server")
    serve_parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)",
    )
    serve_parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=DEFAULT_PORT,
        help=f"Port to bind to (default: {DEFAULT_PORT})",
    )
    serve_parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    serve_parser.set_defaults(func=cmd_serve)

    init_parser = subparsers.add_parser("init-db", help="Create or migrate the database")
    init_parser.add_argument(
        "--db",
        help="Database file (default: database.path from config)",
    )
    init_parser.set_defaults(func=cmd_init_db)

    tree_parser = subparsers.add_parser(
        "tree",
        help="Validate a category tree file and list its candidate paths",
    )
    tree_parser.add_argument("file", help="YAML or JSON category tree file")
    tree_parser.set_defaults(func=cmd_tree)

    version_parser = subparsers.add_parser("version", help="Show version information")
    version_parser.set_defaults(func=cmd_version)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments. Uses sys.argv if None.

    Returns:
        Exit code.
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.version:
        return cmd_version(args)

    setup_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 0

    result: int = args.func(args)
    return result


def run() -> NoReturn:
    """Entry point that handles interrupts and exit codes."""
    try:
        exit_code = main()
    except KeyboardInterrupt:
        console.print("\n[dim]Interrupted.[/dim]")
        exit_code = 130
    except Exception as e:
        console.print(f"[red]Unexpected error: {e}[/red]")
        logger.exception("Unexpected error")
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    run()
