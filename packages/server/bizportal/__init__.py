"""Business portal API server."""
