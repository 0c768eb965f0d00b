"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from app.api.routes.auth_routes import router as auth_router
from app.api.routes.profile_routes import router as profile_router
from app.api.routes.eligibility_routes import router as eligibility_router
from app.api.routes.resume_routes import router as resume_router
from app.api.routes.interview_routes import router as interview_router
from app.api.routes.gateway_routes import router as gateway_router
from app.api.routes.dashboard_routes import router as dashboard_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(profile_router)
api_router.include_router(eligibility_router)
api_router.include_router(resume_router)
api_router.include_router(interview_router)
api_router.include_router(gateway_router)
api_router.include_router(dashboard_router)
