from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Sequence

from sqlmodel import Session, select

from hostmate.core.errors import NotFound
from hostmate.models import Guest, Meal, MealGuest
from hostmate.models.base import utcnow
from hostmate.schemas import MealGuestLink

from .ownership import get_owned

logger = logging.getLogger(__name__)


def list_meals(session: Session, user_id: str) -> List[Meal]:
    stmt = (
        select(Meal)
        .where(Meal.user_id == user_id)
        .order_by(Meal.date.asc(), Meal.name.asc(), Meal.id.asc())
    )
    return list(session.exec(stmt).all())


def create_meal(
    session: Session,
    user_id: str,
    meal_date: date,
    name: str,
    description: Optional[str] = None,
) -> Meal:
    meal = Meal(user_id=user_id, date=meal_date, name=name, description=description)
    session.add(meal)
    session.commit()
    session.refresh(meal)
    return meal


def edit_meal(
    session: Session,
    meal: Meal,
    meal_date: date,
    name: str,
    description: Optional[str] = None,
) -> Meal:
    meal.date = meal_date
    meal.name = name
    meal.description = description
    meal.updated_at = utcnow()
    session.add(meal)
    session.commit()
    session.refresh(meal)
    return meal


def delete_meal(session: Session, meal: Meal) -> None:
    session.delete(meal)
    session.commit()


def meal_guests(session: Session, meal_id: str) -> List[Guest]:
    stmt = (
        select(Guest)
        .join(MealGuest, MealGuest.guest_id == Guest.id)
        .where(MealGuest.meal_id == meal_id)
        .order_by(Guest.name.asc(), Guest.id.asc())
    )
    return list(session.exec(stmt).all())


def invite_guests(session: Session, meal: Meal, guest_ids: Sequence[str], user_id: str) -> List[MealGuest]:
    """
    Add guests to the meal's invite list.

    Every guest is checked before anything is written, so one foreign or
    unknown id leaves the invite list untouched. Already-invited guests are
    returned as-is.
    """
    for guest_id in guest_ids:
        get_owned(session, Guest, guest_id, user_id, "Guest")

    links: List[MealGuest] = []
    for guest_id in guest_ids:
        link = session.get(MealGuest, (meal.id, guest_id))
        if link is None:
            link = MealGuest(meal_id=meal.id, guest_id=guest_id)
            session.add(link)
        links.append(link)
    session.commit()
    for link in links:
        session.refresh(link)
    logger.debug("Meal %s invite list now includes %s", meal.id, list(guest_ids))
    return links


def uninvite_guest(session: Session, meal: Meal, guest_id: str) -> MealGuestLink:
    link = session.get(MealGuest, (meal.id, guest_id))
    if link is None:
        raise NotFound("Guest not found for this meal.")
    removed = MealGuestLink(meal_id=link.meal_id, guest_id=link.guest_id)
    session.delete(link)
    session.commit()
    return removed
