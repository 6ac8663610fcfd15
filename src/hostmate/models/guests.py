from datetime import datetime

from sqlmodel import Field, SQLModel, UniqueConstraint

from hostmate.core.security import generate_rank_token

from .base import new_id, utcnow


class Guest(SQLModel, table=True):
    __tablename__ = "guests"

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str = Field(index=True)
    rank_token: str = Field(default_factory=generate_rank_token, index=True, unique=True)
    user_id: str = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class DishRank(SQLModel, table=True):
    """A guest's 1-3 preference for a dish; one row per (guest, dish)."""

    __tablename__ = "dishes_rank"
    __table_args__ = (UniqueConstraint("guest_id", "dish_id", name="uq_guest_dish"),)

    id: str = Field(default_factory=new_id, primary_key=True)
    guest_id: str = Field(foreign_key="guests.id", ondelete="CASCADE", index=True)
    dish_id: str = Field(foreign_key="dishes.id", ondelete="CASCADE", index=True)
    rank: int
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
