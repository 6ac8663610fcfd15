from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlmodel import Session

from hostmate.core.database import get_session
from hostmate.core.security import get_current_user_id
from hostmate.models import Dish
from hostmate.schemas import DishRead, DishWrite
from hostmate.services import dishes as dish_service
from hostmate.services.ownership import get_owned

router = APIRouter(prefix="/dishes", tags=["dishes"])


@router.get("", response_model=List[DishRead])
def list_dishes(user_id: str = Depends(get_current_user_id), session: Session = Depends(get_session)):
    return dish_service.list_dishes(session, user_id)


@router.post("", response_model=DishRead, status_code=status.HTTP_201_CREATED)
def add_dish(
    payload: DishWrite,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    return dish_service.create_dish(session, user_id, payload.name, payload.category, payload.description)


@router.get("/{dish_id}", response_model=DishRead)
def get_dish(
    dish_id: str,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    return get_owned(session, Dish, dish_id, user_id, "Dish")


@router.put("/{dish_id}", response_model=DishRead)
def edit_dish(
    dish_id: str,
    payload: DishWrite,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    dish = get_owned(session, Dish, dish_id, user_id, "Dish")
    return dish_service.edit_dish(session, dish, payload.name, payload.category, payload.description)


@router.delete("/{dish_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_dish(
    dish_id: str,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    dish = get_owned(session, Dish, dish_id, user_id, "Dish")
    dish_service.delete_dish(session, dish)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
