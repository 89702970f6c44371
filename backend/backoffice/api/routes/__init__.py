"""API routes."""

from fastapi import APIRouter

from backoffice.api.routes import contracts, franchises, royalties

api_router = APIRouter()

api_router.include_router(franchises.router, prefix="/franchises", tags=["franchises"])
api_router.include_router(contracts.router, prefix="/contracts", tags=["contracts"])
api_router.include_router(royalties.router, prefix="/royalties", tags=["royalties"])
