"""Users API router."""
from fastapi import APIRouter, Depends, HTTPException

from marketplace.dependencies import get_current_user_id, get_user_service
from marketplace.schemas import UserProfile
from marketplace.services.user_service import UserService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/me", response_model=UserProfile)
async def get_current_user(
    user_id: str = Depends(get_current_user_id),
    user_service: UserService = Depends(get_user_service)
):
    """Get the account behind the current request identity."""
    user = user_service.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return UserProfile.model_validate(user.model_dump())
