"""
Placement Prep Platform - Main Application

FastAPI backend with:
- PostgreSQL for structured data
- MongoDB for resume text and files
- OpenAI-compatible LLM for interview questions, scoring and resume review
- JWT authentication

Run: uvicorn app.main:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from sqlalchemy.exc import SQLAlchemyError

from app.api.routes import api_router
from app.core.config import get_settings
from app.core.exceptions import GatewayError, PlacementError
from app.db.mongodb import init_mongo_indexes, test_mongo_connection
from app.db.postgres import test_postgres_connection

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Placement Prep Platform",
    description="""
    Campus placement preparation backend.

    ## Features
    - **Authentication**: JWT-based signup/login
    - **Profile**: College, branch, year, CGPA and skills
    - **Eligibility**: Rule-based company eligibility checks
    - **Resumes**: Upload a resume and get AI feedback
    - **Mock Interview**: 5 HR + 4 technical questions with AI scoring
    - **Dashboard**: Progress summary and recent activity

    ## Databases
    - PostgreSQL: Structured data (profiles, sessions, checks, feedback)
    - MongoDB: Documents (resume text, resume files)
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


# Error handlers
@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError):
    logger.error("Gateway error on %s: %s", request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(PlacementError)
async def placement_error_handler(request: Request, exc: PlacementError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(SQLAlchemyError)
@app.exception_handler(PyMongoError)
async def store_error_handler(request: Request, exc: Exception):
    logger.exception("Store failure on %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "Something went wrong. Please try again."}
    )


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize MongoDB indexes on startup."""
    try:
        init_mongo_indexes()
        logger.info("MongoDB indexes initialized")
    except PyMongoError as e:
        logger.warning("MongoDB index initialization failed: %s", e)


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "Placement Prep Platform", "docs": "/docs"}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "postgres": "connected" if test_postgres_connection() else "disconnected",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }
