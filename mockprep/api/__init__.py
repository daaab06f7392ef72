"""
API layer for MockPrep

Contains FastAPI routers for:
- Health checks
- Question generation and resume analysis
- Feedback generation, history and analytics
"""

from mockprep.api.router import api_router

__all__ = ["api_router"]
