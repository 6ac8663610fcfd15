from __future__ import annotations

from typing import List, Optional

from sqlmodel import Session, select

from hostmate.models import Dish, DishCategory
from hostmate.models.base import utcnow


def list_dishes(session: Session, user_id: str) -> List[Dish]:
    stmt = select(Dish).where(Dish.user_id == user_id).order_by(Dish.name.asc(), Dish.id.asc())
    return list(session.exec(stmt).all())


def create_dish(
    session: Session,
    user_id: str,
    name: str,
    category: DishCategory,
    description: Optional[str] = None,
) -> Dish:
    dish = Dish(name=name, category=category, description=description, user_id=user_id)
    session.add(dish)
    session.commit()
    session.refresh(dish)
    return dish


def edit_dish(
    session: Session,
    dish: Dish,
    name: str,
    category: DishCategory,
    description: Optional[str] = None,
) -> Dish:
    dish.name = name
    dish.category = category
    dish.description = description
    dish.updated_at = utcnow()
    session.add(dish)
    session.commit()
    session.refresh(dish)
    return dish


def delete_dish(session: Session, dish: Dish) -> None:
    session.delete(dish)
    session.commit()
