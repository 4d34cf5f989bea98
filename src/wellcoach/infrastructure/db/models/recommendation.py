# src/wellcoach/infrastructure/db/models/recommendation.py
"""
Coaching recommendations (the inbox).
Rows are only ever inserted by the rule engine and mutated through the
read/completed flags.
"""

from sqlalchemy import (
    Column, Integer, String, DateTime, Boolean, Text,
    ForeignKey, CheckConstraint, Index, func
)
from sqlalchemy.orm import relationship

from wellcoach.domain.value_objects import utcnow
from .base import Base, JSONType, ModuleEnum, new_id


class AiRecommendation(Base):
    __tablename__ = 'ai_recommendations'
    __table_args__ = (
        CheckConstraint("priority BETWEEN 1 AND 10", name="ck_ai_recommendations_priority"),
        Index("ix_ai_recommendations_inbox", "user_id", "is_completed", "priority", "created_at"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String, ForeignKey('users.id', ondelete="CASCADE"), nullable=False, index=True)
    module = Column(ModuleEnum, nullable=False)
    recommendation_type = Column(String(50), nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    action_data = Column(JSONType, nullable=True)
    priority = Column(Integer, nullable=False, default=5, server_default='5')
    is_read = Column(Boolean, nullable=False, default=False, server_default='false')
    is_completed = Column(Boolean, nullable=False, default=False, server_default='false')
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", back_populates="recommendations")

    def __repr__(self):
        return f"<AiRecommendation(id={self.id}, module='{self.module}', type='{self.recommendation_type}', priority={self.priority})>"
