from __future__ import annotations

import datetime as dt
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from hostmate.models import Allergy, DishCategory
from hostmate.utils.validators import clean_text, parse_allergies, parse_category, parse_rank


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ----------------------------
# Auth
# ----------------------------

class SignupRequest(ApiModel):
    name: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None


class SignupResponse(ApiModel):
    username: str
    name: str


class LoginRequest(ApiModel):
    username: Optional[str] = None
    password: Optional[str] = None


class LoginResponse(ApiModel):
    user_id: str
    username: str
    name: str
    access_token: str


class AccessTokenResponse(ApiModel):
    access_token: str


# ----------------------------
# Guests & rankings
# ----------------------------

class GuestWrite(ApiModel):
    name: str = Field(default=None, validate_default=True)

    @field_validator("name", mode="before")
    @classmethod
    def _require_name(cls, value: Any) -> str:
        name = clean_text(value)
        if name is None:
            raise ValueError("Missing guest information.")
        return name


class GuestRead(ApiModel):
    id: str
    name: str
    rank_token: str
    user_id: str


class MealGuestRead(ApiModel):
    id: str
    name: str


class RankRequest(ApiModel):
    rank: int = Field(default=None, validate_default=True)

    @field_validator("rank", mode="before")
    @classmethod
    def _check_rank(cls, value: Any) -> int:
        return parse_rank(value)


class DishRankRead(ApiModel):
    guest_id: str
    dish_id: str
    rank: int


class GuestDishRead(ApiModel):
    id: str
    dish_id: str
    dish_rank_id: Optional[str] = None
    name: str
    description: Optional[str] = None
    category: DishCategory
    rank: Optional[int] = None


class GuestRankPage(ApiModel):
    guest: GuestRead
    dishes: List[GuestDishRead]
    host_name: str


# ----------------------------
# Dishes
# ----------------------------

class DishWrite(ApiModel):
    name: str = Field(default=None, validate_default=True)
    category: DishCategory = Field(default=None, validate_default=True)
    description: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def _require_name(cls, value: Any) -> str:
        name = clean_text(value)
        if name is None:
            raise ValueError("Missing dish information.")
        return name

    @field_validator("category", mode="before")
    @classmethod
    def _check_category(cls, value: Any) -> str:
        return parse_category(value)

    @field_validator("description", mode="before")
    @classmethod
    def _clean_description(cls, value: Any) -> Optional[str]:
        return clean_text(value)


class DishRead(ApiModel):
    id: str
    name: str
    description: Optional[str] = None
    category: DishCategory
    user_id: str


# ----------------------------
# Allergies
# ----------------------------

class AllergiesUpdate(ApiModel):
    allergies: List[Allergy] = Field(default=None, validate_default=True)

    @field_validator("allergies", mode="before")
    @classmethod
    def _normalize(cls, value: Any) -> List[str]:
        return parse_allergies(value)


AllergyMap = Dict[str, List[Allergy]]


# ----------------------------
# Meals
# ----------------------------

class MealWrite(ApiModel):
    date: dt.date = Field(default=None, validate_default=True)
    name: str = Field(default=None, validate_default=True)
    description: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def _require_date(cls, value: Any) -> Any:
        if clean_text(value) is None:
            raise ValueError("Missing meal information.")
        return value

    @field_validator("name", mode="before")
    @classmethod
    def _require_name(cls, value: Any) -> str:
        name = clean_text(value)
        if name is None:
            raise ValueError("Missing meal information.")
        return name

    @field_validator("description", mode="before")
    @classmethod
    def _clean_description(cls, value: Any) -> Optional[str]:
        return clean_text(value)


class MealRead(ApiModel):
    id: str
    user_id: str
    date: dt.date
    name: str
    description: Optional[str] = None


class InviteRequest(ApiModel):
    guest_ids: List[str] = Field(default=None, validate_default=True)

    @field_validator("guest_ids", mode="before")
    @classmethod
    def _require_guests(cls, value: Any) -> List[str]:
        if not isinstance(value, list) or not value:
            raise ValueError("Missing meal or guest information.")
        ids: List[str] = []
        for item in value:
            guest_id = clean_text(item)
            if guest_id is None:
                raise ValueError("Missing meal or guest information.")
            if guest_id not in ids:
                ids.append(guest_id)
        return ids


class MealGuestLink(ApiModel):
    meal_id: str
    guest_id: str


# ----------------------------
# Menu
# ----------------------------

class MenuItem(ApiModel):
    dish_id: str
    name: str
    description: Optional[str] = None
    category: DishCategory
    avg_rank: float
    conflicting_allergies: List[Allergy] = []


class MenuResponse(ApiModel):
    main: List[MenuItem] = []
    side: List[MenuItem] = []
    dessert: List[MenuItem] = []
    other: List[MenuItem] = []


class MessageResponse(ApiModel):
    message: str
