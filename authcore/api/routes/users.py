"""User routes for profile management"""

from fastapi import APIRouter, Depends

from ...api.dependencies import get_current_user
from ...application.dtos.user_dtos import UserDto

router = APIRouter()


@router.get("/me", response_model=UserDto)
async def get_current_user_profile(
    current_user: UserDto = Depends(get_current_user)
):
    """Get current user profile"""
    return current_user
