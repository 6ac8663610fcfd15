from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from hostmate.core.database import get_session
from hostmate.core.security import get_current_user_id
from hostmate.models import ALLERGIES, Allergy, Dish, Guest, Meal
from hostmate.schemas import AllergiesUpdate, AllergyMap
from hostmate.services import allergies as allergy_service
from hostmate.services.ownership import get_owned
from hostmate.utils.validators import parse_id_list

router = APIRouter(prefix="/allergies", tags=["allergies"])


@router.get("", response_model=List[str], summary="Closed list of valid allergy labels")
def list_allergies():
    return list(ALLERGIES)


# ----------------------------
# Guests
# ----------------------------

@router.get("/guests", response_model=AllergyMap, summary="Allergies of several guests at once")
def get_guest_allergies_map(
    guest_ids: Optional[str] = Query(default=None, alias="guestIds", description="Comma separated guest ids"),
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    return allergy_service.guest_allergies_map(session, parse_id_list(guest_ids), user_id)


@router.get("/guests/{guest_id}", response_model=List[Allergy])
def get_guest_allergies(
    guest_id: str,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    get_owned(session, Guest, guest_id, user_id, "Guest")
    return allergy_service.get_guest_allergies(session, guest_id)


@router.put("/guests/{guest_id}", response_model=List[Allergy], summary="Replace a guest's allergies")
def set_guest_allergies(
    guest_id: str,
    payload: AllergiesUpdate,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    get_owned(session, Guest, guest_id, user_id, "Guest")
    return allergy_service.set_guest_allergies(session, guest_id, payload.allergies)


# ----------------------------
# Dishes
# ----------------------------

@router.get("/dishes", response_model=AllergyMap, summary="Allergens of several dishes at once")
def get_dish_allergens_map(
    dish_ids: Optional[str] = Query(default=None, alias="dishIds", description="Comma separated dish ids"),
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    return allergy_service.dish_allergens_map(session, parse_id_list(dish_ids), user_id)


@router.get("/dishes/{dish_id}", response_model=List[Allergy])
def get_dish_allergens(
    dish_id: str,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    get_owned(session, Dish, dish_id, user_id, "Dish")
    return allergy_service.get_dish_allergens(session, dish_id)


@router.put("/dishes/{dish_id}", response_model=List[Allergy], summary="Replace a dish's allergens")
def set_dish_allergens(
    dish_id: str,
    payload: AllergiesUpdate,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    get_owned(session, Dish, dish_id, user_id, "Dish")
    return allergy_service.set_dish_allergens(session, dish_id, payload.allergies)


# ----------------------------
# Meals
# ----------------------------

@router.get("/meals/{meal_id}", response_model=List[Allergy], summary="Allergies of everyone invited to a meal")
def get_meal_allergies(
    meal_id: str,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    get_owned(session, Meal, meal_id, user_id, "Meal")
    return allergy_service.meal_allergies(session, meal_id)
