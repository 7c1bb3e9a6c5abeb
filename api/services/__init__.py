"""Service-layer helpers used by the API routers."""
