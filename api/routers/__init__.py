"""
API routers.
"""
from api.routers.credentials import router as credentials_router

__all__ = ['credentials_router']
