from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship
from ..base import Base

class Subject(Base):
    __tablename__ = "subjects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, unique=True)
    name_ar = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    icon = Column(String, nullable=True)
    color = Column(String, nullable=True)

    # Relationships with cascade delete
    lessons = relationship("Lesson", back_populates="subject", cascade="all, delete-orphan")
    questions = relationship("QuestionModel", back_populates="subject", cascade="all, delete-orphan")
