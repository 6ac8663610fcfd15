from __future__ import annotations

from typing import Type, TypeVar

from sqlmodel import Session, SQLModel

from hostmate.core.errors import NotFound
from hostmate.core.security import verify_resource_ownership

Owned = TypeVar("Owned", bound=SQLModel)


def get_owned(session: Session, model: Type[Owned], resource_id: str, user_id: str, label: str) -> Owned:
    """Load ``model`` by id: 404 when absent, 403 when another host owns it."""
    resource = session.get(model, resource_id)
    if resource is None:
        raise NotFound(f"{label} not found.")
    verify_resource_ownership(resource.user_id, user_id)
    return resource
