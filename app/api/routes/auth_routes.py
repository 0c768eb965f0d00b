"""
Authentication Routes

POST /auth/register - Register and create the student profile
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info
"""

import logging

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.exc import IntegrityError

from app.core.auth import hash_password, verify_password, create_access_token, get_current_user
from app.services.store_service import ProfileStore, get_profile_store
from app.utils.validators import profile_completion, year_label
from app.schemas.schemas import (
    RegisterRequest, LoginRequest, TokenResponse, ProfileResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

DUPLICATE_EMAIL = "This email is already registered. Please login instead."


def _token_for(profile: dict) -> TokenResponse:
    token = create_access_token(data={"sub": str(profile["id"])})
    return TokenResponse(access_token=token, user_id=profile["id"], name=profile["name"])


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(
    request: RegisterRequest,
    profiles: ProfileStore = Depends(get_profile_store)
):
    """
    Register a new student account.

    The profile is created in the same step, and the response carries a
    token so the client is signed in right away.
    """
    email = request.email.lower()
    if profiles.email_exists(email):
        raise HTTPException(status_code=400, detail=DUPLICATE_EMAIL)

    try:
        profile = profiles.create(
            email=email,
            password_hash=hash_password(request.password),
            name=request.name,
            college=request.college,
            branch=request.branch,
            year=request.year,
            cgpa=request.cgpa,
            skills=request.skills,
        )
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        raise HTTPException(status_code=400, detail=DUPLICATE_EMAIL)
    logger.info("Registered user %s", profile["id"])
    return _token_for(profile)


@router.post("/login", response_model=TokenResponse)
async def login(
    request: LoginRequest,
    profiles: ProfileStore = Depends(get_profile_store)
):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    user = profiles.get_credentials(request.email.lower())

    if not user or not verify_password(request.password, user["password_hash"]):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    return _token_for(user)


@router.get("/me", response_model=ProfileResponse)
async def get_me(user: dict = Depends(get_current_user)):
    """Get current authenticated user's info."""
    return ProfileResponse(
        **user,
        year_label=year_label(user.get("year")),
        completion=profile_completion(user),
    )
