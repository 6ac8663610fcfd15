from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlmodel import Session

from hostmate.core.database import get_session
from hostmate.core.security import get_current_user_id
from hostmate.models import Guest
from hostmate.schemas import (
    DishRankRead,
    GuestDishRead,
    GuestRankPage,
    GuestRead,
    GuestWrite,
    RankRequest,
)
from hostmate.services import guests as guest_service
from hostmate.services.ownership import get_owned

router = APIRouter(prefix="/guests", tags=["guests"])


# ----------------------------
# Public: rank-token capability
# ----------------------------

@router.get("/token/{rank_token}", response_model=GuestRankPage, summary="Ranking page of a guest (no login)")
def get_guest_by_rank_token(rank_token: str, session: Session = Depends(get_session)):
    return guest_service.rank_page(session, rank_token)


@router.post(
    "/token/{rank_token}/dishes/{dish_id}",
    response_model=DishRankRead,
    summary="Guest submits a 1-3 rank for a dish (no login)",
)
def rank_dish_by_rank_token(
    rank_token: str,
    dish_id: str,
    payload: RankRequest,
    session: Session = Depends(get_session),
):
    return guest_service.rank_dish_by_token(session, rank_token, dish_id, payload.rank)


# ----------------------------
# Host
# ----------------------------

@router.get("", response_model=List[GuestRead])
def list_guests(user_id: str = Depends(get_current_user_id), session: Session = Depends(get_session)):
    return guest_service.list_guests(session, user_id)


@router.post("", response_model=GuestRead, status_code=status.HTTP_201_CREATED)
def add_guest(
    payload: GuestWrite,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    return guest_service.create_guest(session, user_id, payload.name)


@router.put("/{guest_id}", response_model=GuestRead)
def update_guest(
    guest_id: str,
    payload: GuestWrite,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    guest = get_owned(session, Guest, guest_id, user_id, "Guest")
    return guest_service.rename_guest(session, guest, payload.name)


@router.delete("/{guest_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_guest(
    guest_id: str,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    guest = get_owned(session, Guest, guest_id, user_id, "Guest")
    guest_service.delete_guest(session, guest)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{guest_id}/dishes", response_model=List[GuestDishRead])
def get_guest_dishes(
    guest_id: str,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    guest = get_owned(session, Guest, guest_id, user_id, "Guest")
    return guest_service.guest_dishes(session, guest)


@router.post("/{guest_id}/dishes/{dish_id}", response_model=DishRankRead, summary="Host ranks a dish for a guest")
def rank_dish(
    guest_id: str,
    dish_id: str,
    payload: RankRequest,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    guest = get_owned(session, Guest, guest_id, user_id, "Guest")
    return guest_service.rank_dish(session, guest, dish_id, payload.rank)
