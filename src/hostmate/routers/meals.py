from __future__ import annotations

from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel import Session

from hostmate.core.database import get_session
from hostmate.core.errors import BadRequest
from hostmate.core.security import get_current_user_id
from hostmate.models import DishCategory, Meal
from hostmate.schemas import (
    InviteRequest,
    MealGuestLink,
    MealGuestRead,
    MealRead,
    MealWrite,
    MenuResponse,
)
from hostmate.services import meals as meal_service
from hostmate.services import menu as menu_service
from hostmate.services.ownership import get_owned
from hostmate.utils.validators import parse_count, parse_flag

router = APIRouter(prefix="/meals", tags=["meals"])


def menu_limits(
    main_count: Optional[str],
    side_count: Optional[str],
    dessert_count: Optional[str],
    other_count: Optional[str],
) -> Dict[DishCategory, Optional[int]]:
    """Per-category result sizes from the query string; absent means default."""
    raw = {
        DishCategory.main: ("mainCount", main_count),
        DishCategory.side: ("sideCount", side_count),
        DishCategory.dessert: ("dessertCount", dessert_count),
        DishCategory.other: ("otherCount", other_count),
    }
    try:
        return {category: parse_count(name, value) for category, (name, value) in raw.items()}
    except ValueError as exc:
        raise BadRequest(str(exc))


@router.get("", response_model=List[MealRead])
def list_meals(user_id: str = Depends(get_current_user_id), session: Session = Depends(get_session)):
    return meal_service.list_meals(session, user_id)


@router.post("", response_model=MealRead, status_code=status.HTTP_201_CREATED)
def add_meal(
    payload: MealWrite,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    return meal_service.create_meal(session, user_id, payload.date, payload.name, payload.description)


@router.get("/{meal_id}", response_model=MealRead)
def get_meal(
    meal_id: str,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    return get_owned(session, Meal, meal_id, user_id, "Meal")


@router.put("/{meal_id}", response_model=MealRead)
def edit_meal(
    meal_id: str,
    payload: MealWrite,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    meal = get_owned(session, Meal, meal_id, user_id, "Meal")
    return meal_service.edit_meal(session, meal, payload.date, payload.name, payload.description)


@router.delete("/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_meal(
    meal_id: str,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    meal = get_owned(session, Meal, meal_id, user_id, "Meal")
    meal_service.delete_meal(session, meal)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ----------------------------
# Invite list
# ----------------------------

@router.get("/{meal_id}/guests", response_model=List[MealGuestRead])
def get_meal_guests(
    meal_id: str,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    get_owned(session, Meal, meal_id, user_id, "Meal")
    return meal_service.meal_guests(session, meal_id)


@router.post("/{meal_id}/guests", response_model=List[MealGuestLink], summary="Invite guests to a meal")
def add_guests_to_meal(
    meal_id: str,
    payload: InviteRequest,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    meal = get_owned(session, Meal, meal_id, user_id, "Meal")
    return meal_service.invite_guests(session, meal, payload.guest_ids, user_id)


@router.delete("/{meal_id}/guests/{guest_id}", response_model=MealGuestLink, summary="Uninvite a guest")
def remove_guest_from_meal(
    meal_id: str,
    guest_id: str,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    meal = get_owned(session, Meal, meal_id, user_id, "Meal")
    return meal_service.uninvite_guest(session, meal, guest_id)


# ----------------------------
# Menu
# ----------------------------

@router.get("/{meal_id}/menu", response_model=MenuResponse, summary="Suggested menu, best ranked dishes first")
def get_menu(
    meal_id: str,
    user_id: str = Depends(get_current_user_id),
    include_unsafe: Optional[str] = Query(default=None, alias="includeUnsafe"),
    main_count: Optional[str] = Query(default=None, alias="mainCount"),
    side_count: Optional[str] = Query(default=None, alias="sideCount"),
    dessert_count: Optional[str] = Query(default=None, alias="dessertCount"),
    other_count: Optional[str] = Query(default=None, alias="otherCount"),
    session: Session = Depends(get_session),
):
    meal = get_owned(session, Meal, meal_id, user_id, "Meal")
    limits = menu_limits(main_count, side_count, dessert_count, other_count)
    return menu_service.compute_menu(session, meal, parse_flag(include_unsafe), limits)
