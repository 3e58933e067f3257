# app/routers/__init__.py

from app.routers import health
from app.routers import facilities
from app.routers import comparisons
from app.routers import tickets

__all__ = ["health", "facilities", "comparisons", "tickets"]
