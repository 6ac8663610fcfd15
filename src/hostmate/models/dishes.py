from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import Field, SQLModel

from .base import new_id, utcnow


class DishCategory(str, Enum):
    main = "main"
    side = "side"
    dessert = "dessert"
    other = "other"


DISH_CATEGORIES = tuple(category.value for category in DishCategory)


class Dish(SQLModel, table=True):
    __tablename__ = "dishes"

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str = Field(index=True)
    description: Optional[str] = None
    category: DishCategory = Field(default=DishCategory.other, index=True)
    user_id: str = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
