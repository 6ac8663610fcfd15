from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Sequence, Type

from sqlmodel import Session, SQLModel, select

from hostmate.core.database import transaction
from hostmate.core.errors import NotFound
from hostmate.core.security import verify_resource_ownership
from hostmate.models import ALLERGIES, Allergy, Dish, DishAllergen, Guest, GuestAllergy, MealGuest

logger = logging.getLogger(__name__)


def sort_allergies(allergies: Iterable[Allergy]) -> List[Allergy]:
    """De-duplicate and order by the vocabulary's display order."""
    return sorted({Allergy(a) for a in allergies}, key=lambda a: ALLERGIES.index(a.value))


def get_guest_allergies(session: Session, guest_id: str) -> List[Allergy]:
    rows = session.exec(select(GuestAllergy.allergy).where(GuestAllergy.guest_id == guest_id)).all()
    return sort_allergies(rows)


def get_dish_allergens(session: Session, dish_id: str) -> List[Allergy]:
    rows = session.exec(select(DishAllergen.allergy).where(DishAllergen.dish_id == dish_id)).all()
    return sort_allergies(rows)


def set_guest_allergies(session: Session, guest_id: str, allergies: Sequence[Allergy]) -> List[Allergy]:
    """Replace the guest's allergy set with exactly ``allergies``."""
    wanted = sort_allergies(allergies)
    with transaction(session):
        for row in session.exec(select(GuestAllergy).where(GuestAllergy.guest_id == guest_id)).all():
            session.delete(row)
        # Flush deletes first: re-inserted rows reuse the same primary keys.
        session.flush()
        session.add_all([GuestAllergy(guest_id=guest_id, allergy=allergy) for allergy in wanted])
    logger.debug("Guest %s allergies set to %s", guest_id, [a.value for a in wanted])
    return wanted


def set_dish_allergens(session: Session, dish_id: str, allergies: Sequence[Allergy]) -> List[Allergy]:
    """Replace the dish's allergen set with exactly ``allergies``."""
    wanted = sort_allergies(allergies)
    with transaction(session):
        for row in session.exec(select(DishAllergen).where(DishAllergen.dish_id == dish_id)).all():
            session.delete(row)
        session.flush()
        session.add_all([DishAllergen(dish_id=dish_id, allergy=allergy) for allergy in wanted])
    logger.debug("Dish %s allergens set to %s", dish_id, [a.value for a in wanted])
    return wanted


def _check_owned_ids(
    session: Session,
    model: Type[SQLModel],
    ids: Sequence[str],
    user_id: str,
    label: str,
) -> None:
    found = {row.id: row for row in session.exec(select(model).where(model.id.in_(ids))).all()}
    for resource_id in ids:
        resource = found.get(resource_id)
        if resource is None:
            raise NotFound(f"{label} not found.")
        verify_resource_ownership(resource.user_id, user_id)


def guest_allergies_map(session: Session, guest_ids: Sequence[str], user_id: str) -> Dict[str, List[Allergy]]:
    if not guest_ids:
        return {}
    _check_owned_ids(session, Guest, guest_ids, user_id, "Guest")

    rows = session.exec(
        select(GuestAllergy.guest_id, GuestAllergy.allergy).where(GuestAllergy.guest_id.in_(guest_ids))
    ).all()
    result: Dict[str, List[Allergy]] = {guest_id: [] for guest_id in guest_ids}
    for guest_id, allergy in rows:
        result[guest_id].append(allergy)
    return {guest_id: sort_allergies(values) for guest_id, values in result.items()}


def dish_allergens_map(session: Session, dish_ids: Sequence[str], user_id: str) -> Dict[str, List[Allergy]]:
    if not dish_ids:
        return {}
    _check_owned_ids(session, Dish, dish_ids, user_id, "Dish")

    rows = session.exec(
        select(DishAllergen.dish_id, DishAllergen.allergy).where(DishAllergen.dish_id.in_(dish_ids))
    ).all()
    result: Dict[str, List[Allergy]] = {dish_id: [] for dish_id in dish_ids}
    for dish_id, allergy in rows:
        result[dish_id].append(allergy)
    return {dish_id: sort_allergies(values) for dish_id, values in result.items()}


def meal_allergies(session: Session, meal_id: str) -> List[Allergy]:
    """Union of the allergies of every guest currently invited to the meal."""
    rows = session.exec(
        select(GuestAllergy.allergy)
        .select_from(MealGuest)
        .join(GuestAllergy, GuestAllergy.guest_id == MealGuest.guest_id)
        .where(MealGuest.meal_id == meal_id)
    ).all()
    return sort_allergies(rows)
