import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.infrastructure.db.models.user_model import UserProfile
from app.infrastructure.repositories.dashboard_repository import DashboardRepository
from app.presentation.dependencies import get_db, get_user_profile
from app.presentation.schemas.progress_schema import DashboardResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardResponse)
def get_dashboard(
    profile: UserProfile = Depends(get_user_profile),
    db: Session = Depends(get_db),
):
    try:
        return DashboardRepository(db).fetch_dashboard(profile)
    except Exception as e:
        logger.error(f"Error building dashboard for user {profile.id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to load dashboard")
