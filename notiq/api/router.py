"""API router aggregator."""
from fastapi import APIRouter
from notiq.api.routers import auth, note

api_router = APIRouter()
api_router.include_router(auth.router)
api_router.include_router(note.router)
