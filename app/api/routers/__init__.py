"""
app/api/routers package marker.
"""

from app.api.routers.rates import router as rates_router

__all__ = [
    "rates_router",
]
