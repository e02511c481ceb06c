from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..base import Base

class Lesson(Base):
    __tablename__ = "lessons"

    id = Column(Integer, primary_key=True, index=True)
    subject_id = Column(Integer, ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    title_ar = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    content = Column(JSON, nullable=False, default=lambda: {"sections": []})
    order_index = Column(Integer, nullable=False, default=0)
    difficulty_level = Column(Integer, nullable=False, default=1)
    points_reward = Column(Integer, nullable=False, default=10)
    is_published = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    subject = relationship("Subject", back_populates="lessons")
    progress = relationship("UserProgress", back_populates="lesson", cascade="all, delete-orphan")
