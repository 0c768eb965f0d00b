"""
Profile Routes

GET /profile - Get own profile with completion percentage
PUT /profile - Update profile (college, branch, year, cgpa, skills)
"""

from fastapi import APIRouter, HTTPException, Depends

from app.core.auth import get_current_user
from app.services.store_service import ProfileStore, get_profile_store
from app.utils.validators import profile_completion, year_label
from app.schemas.schemas import ProfileResponse, ProfileUpdate

router = APIRouter(prefix="/profile", tags=["Profile"])


def _profile_response(profile: dict) -> ProfileResponse:
    return ProfileResponse(
        **profile,
        year_label=year_label(profile.get("year")),
        completion=profile_completion(profile),
    )


@router.get("", response_model=ProfileResponse)
async def get_profile(user: dict = Depends(get_current_user)):
    """Get current student's profile."""
    return _profile_response(user)


@router.put("", response_model=ProfileResponse)
async def update_profile(
    data: ProfileUpdate,
    user: dict = Depends(get_current_user),
    profiles: ProfileStore = Depends(get_profile_store)
):
    """Update student profile. Only provided fields are updated."""
    fields = data.model_dump(exclude_none=True)

    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")

    updated = profiles.update(user["id"], fields)
    if not updated:
        raise HTTPException(status_code=404, detail="Profile not found")

    return _profile_response(updated)
