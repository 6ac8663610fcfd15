from __future__ import annotations

import logging
from typing import List, Optional

from sqlmodel import Session, select

from hostmate.core.errors import NotFound
from hostmate.models import Dish, DishRank, Guest
from hostmate.models.base import utcnow
from hostmate.schemas import GuestDishRead, GuestRankPage, GuestRead

from .users import get_user_name

logger = logging.getLogger(__name__)


def list_guests(session: Session, user_id: str) -> List[Guest]:
    stmt = select(Guest).where(Guest.user_id == user_id).order_by(Guest.name.asc(), Guest.id.asc())
    return list(session.exec(stmt).all())


def create_guest(session: Session, user_id: str, name: str) -> Guest:
    guest = Guest(name=name, user_id=user_id)
    session.add(guest)
    session.commit()
    session.refresh(guest)
    return guest


def rename_guest(session: Session, guest: Guest, name: str) -> Guest:
    guest.name = name
    guest.updated_at = utcnow()
    session.add(guest)
    session.commit()
    session.refresh(guest)
    return guest


def delete_guest(session: Session, guest: Guest) -> None:
    session.delete(guest)
    session.commit()


def get_guest_by_rank_token(session: Session, rank_token: str) -> Guest:
    guest = session.exec(select(Guest).where(Guest.rank_token == rank_token)).first()
    if guest is None:
        raise NotFound("Guest not found.")
    return guest


def guest_dishes(session: Session, guest: Guest) -> List[GuestDishRead]:
    """
    All of the host's dishes with this guest's rank attached.

    Outer join on the guest's own rank rows, so unranked dishes still show up
    with ``rank`` = None.
    """
    rows = session.exec(
        select(
            Dish.id,            # 0
            DishRank.id,        # 1
            Dish.name,          # 2
            Dish.description,   # 3
            Dish.category,      # 4
            DishRank.rank,      # 5
        )
        .select_from(Dish)
        .join(
            DishRank,
            (DishRank.dish_id == Dish.id) & (DishRank.guest_id == guest.id),
            isouter=True,
        )
        .where(Dish.user_id == guest.user_id)
        .order_by(Dish.name.asc(), Dish.id.asc())
    ).all()

    return [
        GuestDishRead(
            id=dish_id,
            dish_id=dish_id,
            dish_rank_id=rank_id,
            name=name,
            description=description,
            category=category,
            rank=rank,
        )
        for dish_id, rank_id, name, description, category, rank in rows
    ]


def _dish_of_host(session: Session, dish_id: str, user_id: str) -> Optional[Dish]:
    return session.exec(
        select(Dish).where(Dish.id == dish_id, Dish.user_id == user_id)
    ).first()


def rank_dish(session: Session, guest: Guest, dish_id: str, rank: int) -> DishRank:
    """
    Upsert the guest's rank for a dish (unique per guest+dish).

    The dish must belong to the guest's host; anything else is reported as
    not found so foreign dish ids are not disclosed.
    """
    if _dish_of_host(session, dish_id, guest.user_id) is None:
        raise NotFound("Dish not found.")

    row = session.exec(
        select(DishRank).where(DishRank.guest_id == guest.id, DishRank.dish_id == dish_id)
    ).first()

    if row:
        row.rank = rank
        row.updated_at = utcnow()
    else:
        row = DishRank(guest_id=guest.id, dish_id=dish_id, rank=rank)

    session.add(row)
    session.commit()
    session.refresh(row)
    logger.debug("Guest %s ranked dish %s as %s", guest.id, dish_id, rank)
    return row


def rank_page(session: Session, rank_token: str) -> GuestRankPage:
    guest = get_guest_by_rank_token(session, rank_token)
    return GuestRankPage(
        guest=GuestRead.model_validate(guest),
        dishes=guest_dishes(session, guest),
        host_name=get_user_name(session, guest.user_id),
    )


def rank_dish_by_token(session: Session, rank_token: str, dish_id: str, rank: int) -> DishRank:
    guest = get_guest_by_rank_token(session, rank_token)
    return rank_dish(session, guest, dish_id, rank)
