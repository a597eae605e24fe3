"""
Routers package.
The JSON API is mounted under /api, the web pages at the root.
"""
from fastapi import APIRouter

from . import api, auth, salaries

api_router = APIRouter()
api_router.include_router(api.router, tags=["API"])

web_router = APIRouter(include_in_schema=False)
web_router.include_router(auth.router)
web_router.include_router(salaries.router)

__all__ = ["api_router", "web_router"]
