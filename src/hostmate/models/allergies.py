from datetime import datetime
from enum import Enum

from sqlmodel import Field, SQLModel

from .base import utcnow


class Allergy(str, Enum):
    gluten = "gluten"
    dairy = "dairy"
    eggs = "eggs"
    fish = "fish"
    shellfish = "shellfish"
    peanuts = "peanuts"
    tree_nuts = "tree-nuts"
    soy = "soy"
    sesame = "sesame"


# Closed vocabulary, in display order.
ALLERGIES = tuple(allergy.value for allergy in Allergy)


class GuestAllergy(SQLModel, table=True):
    """Guest is allergic to ``allergy``."""

    __tablename__ = "guest_allergies"

    guest_id: str = Field(foreign_key="guests.id", ondelete="CASCADE", primary_key=True)
    allergy: Allergy = Field(primary_key=True)
    created_at: datetime = Field(default_factory=utcnow)


class DishAllergen(SQLModel, table=True):
    """Dish contains (or may contain) ``allergy``."""

    __tablename__ = "dish_allergens"

    dish_id: str = Field(foreign_key="dishes.id", ondelete="CASCADE", primary_key=True)
    allergy: Allergy = Field(primary_key=True)
    created_at: datetime = Field(default_factory=utcnow)
