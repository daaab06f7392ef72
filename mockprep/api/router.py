"""
Main API router for MockPrep

Aggregates all API routes and provides the main application router.
"""

from fastapi import APIRouter

from mockprep.api.endpoints import feedback, health, interview

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(
    health.router,
    tags=["Health"]
)

api_router.include_router(
    interview.router,
    tags=["Interview"]
)

api_router.include_router(
    feedback.router,
    tags=["Feedback"]
)
