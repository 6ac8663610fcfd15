import datetime as dt
from typing import List, Optional

from sqlmodel import Field, Relationship, SQLModel

from .base import new_id, utcnow


class Meal(SQLModel, table=True):
    __tablename__ = "meals"

    id: str = Field(default_factory=new_id, primary_key=True)
    user_id: str = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    date: dt.date = Field(index=True)
    name: str
    description: Optional[str] = None
    created_at: dt.datetime = Field(default_factory=utcnow)
    updated_at: dt.datetime = Field(default_factory=utcnow)

    invitations: List["MealGuest"] = Relationship(
        back_populates="meal",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )


class MealGuest(SQLModel, table=True):
    """Invite list entry: ``guest_id`` is invited to ``meal_id``."""

    __tablename__ = "meal_guests"

    meal_id: str = Field(foreign_key="meals.id", ondelete="CASCADE", primary_key=True)
    guest_id: str = Field(foreign_key="guests.id", ondelete="CASCADE", primary_key=True)
    created_at: dt.datetime = Field(default_factory=utcnow)

    meal: Meal = Relationship(back_populates="invitations")
