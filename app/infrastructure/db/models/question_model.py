from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..base import Base

# ---------------------------
# Quiz questions (read by the game engine)
# ---------------------------
class QuestionModel(Base):
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, index=True)
    subject_id = Column(Integer, ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False, index=True)
    question_text = Column(Text, nullable=False)
    question_type = Column(String(32), nullable=False, default="multiple_choice")
    options = Column(JSON, nullable=False, default=list)  # ["...", "..."]; empty for short_answer
    correct_answer = Column(String, nullable=False)
    explanation = Column(Text)
    difficulty_level = Column(Integer, nullable=False, default=1)  # 1-5
    points = Column(Integer, nullable=False, default=10)
    source = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    subject = relationship("Subject", back_populates="questions")
