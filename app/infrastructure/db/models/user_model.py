#user_model.py
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from ..base import Base
from sqlalchemy.orm import relationship
from sqlalchemy import UniqueConstraint


class UserProfile(Base):
    __tablename__ = "user_profiles"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    full_name = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)
    role = Column(String, nullable=False, default="student")  # "student", "teacher" or "admin"
    points = Column(Integer, nullable=False, default=0)
    level = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    progress = relationship("UserProgress", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    achievements = relationship("UserAchievement", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)

    __table_args__ = (
        UniqueConstraint("email", name="uq_email_user"),
    )
