from functools import lru_cache
from typing import Optional
import logging

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from app.infrastructure.db.session import SessionLocal
from app.infrastructure.db.models.user_model import UserProfile
from app.infrastructure.game_engine.models import UserContext

logger = logging.getLogger(__name__)

STAFF_ROLES = {"teacher", "admin"}


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    x_user_id: Optional[int] = Header(default=None),
    db: Session = Depends(get_db),
) -> UserContext:
    """
    Resolves the caller into an explicit UserContext. Sign-in happens
    upstream; this only checks that the forwarded user id has a profile.
    """
    if x_user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    user = db.query(UserProfile).filter(UserProfile.id == x_user_id).first()
    if not user:
        logger.warning(f"Unknown user_id in request header: {x_user_id}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    return UserContext(user_id=user.id, role=user.role)


def admin_required(current_user: UserContext = Depends(get_current_user)) -> UserContext:
    if current_user.role not in STAFF_ROLES:
        logger.warning(
            f"Access denied for non-staff user_id: {current_user.user_id}"
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Teacher or admin privileges required",
        )
    logger.info(f"Staff access granted for user_id: {current_user.user_id}")
    return current_user


def get_user_profile(
    current_user: UserContext = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserProfile:
    user = db.query(UserProfile).filter(UserProfile.id == current_user.user_id).first()

    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )

    return user


@lru_cache
def get_game_manager():
    from app.infrastructure.game_engine.scheduler import TimerScheduler
    from app.infrastructure.game_engine.session_manager import GameSessionManager
    from app.infrastructure.repositories.progress_repository import SessionScopedPointsSink

    return GameSessionManager(
        points_sink=SessionScopedPointsSink(SessionLocal),
        scheduler=TimerScheduler(),
    )


@lru_cache
def get_chat_relay():
    from app.infrastructure.assistant.chat_relay import ChatRelay
    from app.infrastructure.config import CHAT_MODEL_REPO_ID, CHAT_TIMEOUT_SECONDS, HF_TOKEN

    llm_client = None
    if HF_TOKEN:
        from app.infrastructure.assistant.huggingface_client import HuggingFaceChatClient

        llm_client = HuggingFaceChatClient(
            repo_id=CHAT_MODEL_REPO_ID,
            api_token=HF_TOKEN,
            timeout=CHAT_TIMEOUT_SECONDS,
        )
    else:
        logger.warning("HF_TOKEN is not set; chat relay will answer with an error")

    return ChatRelay(llm_client)


def parse_filter(value: Optional[str], name: str) -> Optional[int]:
    """Integer query filter where "all" (or nothing) means no filtering."""
    if value is None or value == "all":
        return None
    try:
        return int(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {name}: {value}")
