"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from app.api.routes import trips

api_router = APIRouter()

# Include all route modules
api_router.include_router(trips.router)
