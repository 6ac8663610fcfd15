"""
Menu suggestion for a meal.

For every dish category the candidates are the host's dishes that at least
one *invited* guest has ranked; they are ordered by the average rank those
invited guests gave (higher is better). Allergy conflicts are computed against
the invited guests only: in safe mode conflicting dishes are dropped before the
per-category limit is applied, in unsafe mode every candidate is returned with
its conflicting allergens listed.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Sequence

from sqlalchemy import func
from sqlmodel import Session, select

from hostmate.models import Dish, DishAllergen, DishCategory, DishRank, GuestAllergy, Meal, MealGuest
from hostmate.schemas import MenuItem, MenuResponse

from .allergies import sort_allergies

logger = logging.getLogger(__name__)

DEFAULT_MENU_LIMITS: Dict[DishCategory, int] = {
    DishCategory.main: 2,
    DishCategory.side: 4,
    DishCategory.dessert: 1,
    DishCategory.other: 3,
}


def resolve_limits(overrides: Optional[Mapping[DishCategory, Optional[int]]] = None) -> Dict[DishCategory, int]:
    limits = dict(DEFAULT_MENU_LIMITS)
    for category, value in (overrides or {}).items():
        if value is None:
            continue
        if value < 0:
            raise ValueError(f"{category.value} limit must be a non-negative integer")
        limits[DishCategory(category)] = value
    return limits


def rank_candidates(session: Session, meal: Meal, category: DishCategory) -> List[MenuItem]:
    """
    Candidates of one category, best first.

    Anchored on the invite list: only rank rows of invited guests join in,
    so both candidacy and the average are scoped to this meal.
    """
    avg_rank = func.avg(DishRank.rank).label("avg_rank")
    stmt = (
        select(Dish.id, Dish.name, Dish.description, Dish.category, avg_rank)
        .select_from(MealGuest)
        .join(DishRank, DishRank.guest_id == MealGuest.guest_id)
        .join(Dish, Dish.id == DishRank.dish_id)
        .where(
            MealGuest.meal_id == meal.id,
            Dish.user_id == meal.user_id,
            Dish.category == category,
        )
        .group_by(Dish.id, Dish.name, Dish.description, Dish.category)
        .order_by(avg_rank.desc(), Dish.name.asc(), Dish.id.asc())
    )
    return [
        MenuItem(
            dish_id=dish_id,
            name=name,
            description=description,
            category=dish_category,
            avg_rank=float(average),
        )
        for dish_id, name, description, dish_category, average in session.exec(stmt).all()
    ]


def conflicting_allergies(session: Session, meal_id: str, dish_ids: Sequence[str]) -> Dict[str, list]:
    """
    Allergens of each dish that some invited guest is allergic to.

    Dishes without a conflict are absent from the result. Two guests sharing
    an allergy still yield that allergen once.
    """
    if not dish_ids:
        return {}

    rows = session.exec(
        select(DishAllergen.dish_id, DishAllergen.allergy)
        .select_from(DishAllergen)
        .join(GuestAllergy, GuestAllergy.allergy == DishAllergen.allergy)
        .join(MealGuest, MealGuest.guest_id == GuestAllergy.guest_id)
        .where(MealGuest.meal_id == meal_id, DishAllergen.dish_id.in_(dish_ids))
        .distinct()
    ).all()

    conflicts: Dict[str, list] = {}
    for dish_id, allergy in rows:
        conflicts.setdefault(dish_id, []).append(allergy)
    return {dish_id: sort_allergies(values) for dish_id, values in conflicts.items()}


def suggest_category(
    session: Session,
    meal: Meal,
    category: DishCategory,
    include_unsafe: bool,
    limit: int,
) -> List[MenuItem]:
    candidates = rank_candidates(session, meal, category)
    conflicts = conflicting_allergies(session, meal.id, [item.dish_id for item in candidates])

    items: List[MenuItem] = []
    for item in candidates:
        item.conflicting_allergies = conflicts.get(item.dish_id, [])
        if item.conflicting_allergies and not include_unsafe:
            continue
        items.append(item)
    return items[:limit]


def compute_menu(
    session: Session,
    meal: Meal,
    include_unsafe: bool = False,
    limits: Optional[Mapping[DishCategory, Optional[int]]] = None,
) -> MenuResponse:
    resolved = resolve_limits(limits)
    menu = {
        category.value: suggest_category(session, meal, category, include_unsafe, resolved[category])
        for category in DishCategory
    }
    logger.debug(
        "Menu for meal %s (include_unsafe=%s): %s",
        meal.id,
        include_unsafe,
        {name: len(items) for name, items in menu.items()},
    )
    return MenuResponse(**menu)
