from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from ..base import Base

class UserAchievement(Base):
    __tablename__ = "user_achievements"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    achievement_type = Column(String(50), nullable=False)  # first_lesson / points_milestone / perfect_score
    achievement_data = Column(JSON, default=dict)
    earned_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("UserProfile", back_populates="achievements", passive_deletes=True)
