# src/wellcoach/infrastructure/db/models/events.py
"""
Per-module event tables (the event store).

Rows are append-only: nothing in the application updates or deletes them.
Every model exposes its timestamp as `occurred_at` and its module as `MODULE`
so repositories and the analytics code can treat the four tables uniformly.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, Enum, func
from sqlalchemy.orm import relationship, synonym

from wellcoach.domain.entities import Module, MealType
from wellcoach.domain.value_objects import utcnow
from .base import Base, JSONType, enum_values, new_id


class TrainingSession(Base):
    __tablename__ = 'training_sessions'
    MODULE = Module.TRAINING

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String, ForeignKey('users.id', ondelete="CASCADE"), nullable=False, index=True)
    workout_type = Column(String, nullable=False)
    duration = Column(Integer, nullable=False)  # minutes
    calories_burned = Column(Integer, nullable=True)
    exercises = Column(JSONType, nullable=True)
    notes = Column(Text, nullable=True)
    rating = Column(Integer, nullable=True)  # 1-5
    completed_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False, index=True)

    occurred_at = synonym("completed_at")
    user = relationship("User", back_populates="training_sessions")


class NutritionEntry(Base):
    __tablename__ = 'nutrition_entries'
    MODULE = Module.NUTRITION

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String, ForeignKey('users.id', ondelete="CASCADE"), nullable=False, index=True)
    meal_type = Column(Enum(MealType, name="mealtype", values_callable=enum_values), nullable=False)
    food_items = Column(JSONType, nullable=True)
    total_calories = Column(Integer, nullable=False)
    macros = Column(JSONType, nullable=True)  # {protein, carbs, fat, fiber} in grams
    logged_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False, index=True)

    occurred_at = synonym("logged_at")
    user = relationship("User", back_populates="nutrition_entries")


class MentalSession(Base):
    __tablename__ = 'mental_sessions'
    MODULE = Module.MENTAL

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String, ForeignKey('users.id', ondelete="CASCADE"), nullable=False, index=True)
    session_type = Column(String, nullable=False)
    duration = Column(Integer, nullable=True)
    mood_before = Column(Integer, nullable=False)  # 1-10
    mood_after = Column(Integer, nullable=False)  # 1-10
    notes = Column(Text, nullable=True)
    completed_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False, index=True)

    occurred_at = synonym("completed_at")
    user = relationship("User", back_populates="mental_sessions")


class ProductivitySession(Base):
    __tablename__ = 'productivity_sessions'
    MODULE = Module.PRODUCTIVITY

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String, ForeignKey('users.id', ondelete="CASCADE"), nullable=False, index=True)
    session_type = Column(String, nullable=False)
    duration = Column(Integer, nullable=False)
    tasks_completed = Column(Integer, nullable=False)
    focus_score = Column(Integer, nullable=False)  # 1-10
    productivity = Column(JSONType, nullable=True)
    completed_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False, index=True)

    occurred_at = synonym("completed_at")
    user = relationship("User", back_populates="productivity_sessions")


EVENT_MODELS = {
    Module.TRAINING: TrainingSession,
    Module.NUTRITION: NutritionEntry,
    Module.MENTAL: MentalSession,
    Module.PRODUCTIVITY: ProductivitySession,
}
