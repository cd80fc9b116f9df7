"""HTTP surface: FastAPI app factory, routes and error mapping."""

from market_api.api.app import create_app

__all__ = ["create_app"]
