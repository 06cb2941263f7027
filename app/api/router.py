"""Agregador de routers de la API."""
from fastapi import APIRouter
from app.api.routers import admin_auth, auth, health, smtp

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(admin_auth.router)
api_router.include_router(smtp.router)
