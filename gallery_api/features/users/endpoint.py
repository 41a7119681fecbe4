"""Expose the user router for the FastAPI application."""

from fastapi import APIRouter

from .routes import router as user_routes

router = APIRouter()
router.include_router(user_routes)
