# src/wellcoach/infrastructure/db/models/auth.py
"""
SQLAlchemy ORM models for users and their coaching profile.
`users.id` is the opaque subject issued by the identity provider.
"""

from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Enum, func
from sqlalchemy.orm import relationship

from wellcoach.domain.entities import SubscriptionTier, SubscriptionStatus, FitnessLevel
from wellcoach.domain.value_objects import utcnow
from .base import Base, JSONType, ModuleEnum, enum_values, new_id


class User(Base):
    __tablename__ = 'users'

    id = Column(String, primary_key=True)
    email = Column(String, unique=True, nullable=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    profile_image_url = Column(String, nullable=True)

    billing_customer_id = Column(String, nullable=True, unique=True, index=True)
    subscription_id = Column(String, nullable=True)
    subscription_tier = Column(
        Enum(SubscriptionTier, name="subscriptiontier", values_callable=enum_values),
        nullable=False, default=SubscriptionTier.FREE, server_default=SubscriptionTier.FREE.value,
    )
    subscription_status = Column(
        Enum(SubscriptionStatus, name="subscriptionstatus", values_callable=enum_values),
        nullable=False, default=SubscriptionStatus.ACTIVE, server_default=SubscriptionStatus.ACTIVE.value,
    )

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now(), nullable=False)

    # --- Relationships ---
    profile = relationship("UserProfile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    training_sessions = relationship("TrainingSession", back_populates="user", cascade="all, delete-orphan")
    nutrition_entries = relationship("NutritionEntry", back_populates="user", cascade="all, delete-orphan")
    mental_sessions = relationship("MentalSession", back_populates="user", cascade="all, delete-orphan")
    productivity_sessions = relationship("ProductivitySession", back_populates="user", cascade="all, delete-orphan")
    recommendations = relationship("AiRecommendation", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(id={self.id}, tier='{self.subscription_tier}', status='{self.subscription_status}')>"


class UserProfile(Base):
    __tablename__ = 'user_profiles'

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String, ForeignKey('users.id', ondelete="CASCADE"), nullable=False, unique=True)
    primary_goal = Column(ModuleEnum, nullable=True)
    fitness_level = Column(Enum(FitnessLevel, name="fitnesslevel", values_callable=enum_values), nullable=True)
    dietary_restrictions = Column(Text, nullable=True)
    health_conditions = Column(Text, nullable=True)
    weekly_goals = Column(JSONType, nullable=True)
    preferences = Column(JSONType, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now(), nullable=False)

    user = relationship("User", back_populates="profile")
