import datetime as dt

import pytest
from sqlmodel import Session

from hostmate.models import (
    Allergy,
    Dish,
    DishAllergen,
    DishCategory,
    DishRank,
    Guest,
    GuestAllergy,
    Meal,
    MealGuest,
    User,
)
from hostmate.services.menu import DEFAULT_MENU_LIMITS, compute_menu, resolve_limits


class Kitchen:
    """Small builder for menu fixtures written straight to the store."""

    def __init__(self, session: Session):
        self.session = session
        self.host = User(name="Host", username="host", hashed_password="x")
        self._save(self.host)
        self.meal = Meal(user_id=self.host.id, date=dt.date(2025, 6, 1), name="Dinner")
        self._save(self.meal)

    def _save(self, *rows):
        self.session.add_all(rows)
        self.session.commit()
        return rows[0]

    def guest(self, name, allergies=(), invited=True):
        guest = self._save(Guest(name=name, user_id=self.host.id))
        for allergy in allergies:
            self._save(GuestAllergy(guest_id=guest.id, allergy=allergy))
        if invited:
            self._save(MealGuest(meal_id=self.meal.id, guest_id=guest.id))
        return guest

    def dish(self, name, category=DishCategory.main, allergens=()):
        dish = self._save(Dish(name=name, category=category, user_id=self.host.id))
        for allergy in allergens:
            self._save(DishAllergen(dish_id=dish.id, allergy=allergy))
        return dish

    def rank(self, guest, dish, rank):
        self._save(DishRank(guest_id=guest.id, dish_id=dish.id, rank=rank))

    def menu(self, **kwargs):
        return compute_menu(self.session, self.meal, **kwargs)


@pytest.fixture
def kitchen(db_session: Session) -> Kitchen:
    return Kitchen(db_session)


def _ids(items):
    return [item.dish_id for item in items]


def test_safe_mode_drops_dish_conflicting_with_invited_guest(kitchen):
    g1 = kitchen.guest("G1", allergies=[Allergy.dairy])
    g2 = kitchen.guest("G2")
    d_dairy = kitchen.dish("Lasagna", allergens=[Allergy.dairy])
    d_safe = kitchen.dish("Ratatouille")
    kitchen.rank(g1, d_dairy, 1)
    kitchen.rank(g2, d_dairy, 5)
    kitchen.rank(g1, d_safe, 5)
    kitchen.rank(g2, d_safe, 4)

    menu = kitchen.menu()

    assert _ids(menu.main) == [d_safe.id]
    assert menu.main[0].avg_rank == pytest.approx(4.5)
    assert menu.main[0].conflicting_allergies == []
    assert menu.side == [] and menu.dessert == [] and menu.other == []


def test_unsafe_mode_keeps_conflicts_and_lists_them(kitchen):
    g1 = kitchen.guest("G1", allergies=[Allergy.dairy])
    g2 = kitchen.guest("G2")
    d_dairy = kitchen.dish("Lasagna", allergens=[Allergy.dairy])
    d_safe = kitchen.dish("Ratatouille")
    kitchen.rank(g1, d_dairy, 1)
    kitchen.rank(g2, d_dairy, 5)
    kitchen.rank(g1, d_safe, 5)
    kitchen.rank(g2, d_safe, 4)

    menu = kitchen.menu(include_unsafe=True)

    assert _ids(menu.main) == [d_safe.id, d_dairy.id]
    assert [item.avg_rank for item in menu.main] == [pytest.approx(4.5), pytest.approx(3.0)]
    assert menu.main[1].conflicting_allergies == [Allergy.dairy]


def test_uninvited_guests_allergies_are_ignored(kitchen):
    g1 = kitchen.guest("G1")
    kitchen.guest("G3", allergies=[Allergy.peanuts], invited=False)
    d_peanut = kitchen.dish("Satay", allergens=[Allergy.peanuts])
    kitchen.rank(g1, d_peanut, 3)

    menu = kitchen.menu()

    assert _ids(menu.main) == [d_peanut.id]
    assert menu.main[0].conflicting_allergies == []


def test_uninvited_guests_ranks_neither_qualify_nor_count(kitchen):
    g1 = kitchen.guest("G1")
    outsider = kitchen.guest("Outsider", invited=False)
    d_shared = kitchen.dish("Curry")
    d_outsider_only = kitchen.dish("Tofu")
    kitchen.rank(g1, d_shared, 1)
    kitchen.rank(outsider, d_shared, 3)
    kitchen.rank(outsider, d_outsider_only, 3)

    menu = kitchen.menu(include_unsafe=True)

    assert _ids(menu.main) == [d_shared.id]
    assert menu.main[0].avg_rank == pytest.approx(1.0)


def test_never_ranked_dishes_never_appear(kitchen):
    g1 = kitchen.guest("G1")
    ranked = kitchen.dish("Bread", category=DishCategory.side)
    kitchen.dish("Salad", category=DishCategory.side)
    kitchen.dish("Cake", category=DishCategory.dessert)
    kitchen.rank(g1, ranked, 2)

    for include_unsafe in (False, True):
        menu = kitchen.menu(include_unsafe=include_unsafe)
        assert _ids(menu.side) == [ranked.id]
        assert menu.dessert == []


def test_meal_without_guests_yields_empty_menu(kitchen):
    kitchen.dish("Lonely")
    menu = kitchen.menu(include_unsafe=True)
    assert menu.main == [] and menu.side == [] and menu.dessert == [] and menu.other == []


def test_shared_allergy_is_listed_once_and_union_is_sorted(kitchen):
    g1 = kitchen.guest("G1", allergies=[Allergy.eggs, Allergy.dairy])
    g2 = kitchen.guest("G2", allergies=[Allergy.dairy])
    quiche = kitchen.dish("Quiche", allergens=[Allergy.eggs, Allergy.dairy, Allergy.gluten])
    kitchen.rank(g1, quiche, 2)
    kitchen.rank(g2, quiche, 2)

    menu = kitchen.menu(include_unsafe=True)

    assert menu.main[0].conflicting_allergies == [Allergy.dairy, Allergy.eggs]


def test_items_are_ordered_by_average_then_name(kitchen):
    g1 = kitchen.guest("G1")
    g2 = kitchen.guest("G2")
    dishes = {name: kitchen.dish(name, category=DishCategory.other) for name in ("Beta", "Alpha", "Gamma")}
    kitchen.rank(g1, dishes["Gamma"], 3)
    kitchen.rank(g2, dishes["Gamma"], 3)
    kitchen.rank(g1, dishes["Beta"], 2)
    kitchen.rank(g1, dishes["Alpha"], 3)
    kitchen.rank(g2, dishes["Alpha"], 1)

    menu = kitchen.menu()

    assert [item.name for item in menu.other] == ["Gamma", "Alpha", "Beta"]
    averages = [item.avg_rank for item in menu.other]
    assert averages == sorted(averages, reverse=True)


def test_default_limits_apply_per_category(kitchen):
    g1 = kitchen.guest("G1")
    for i in range(6):
        kitchen.rank(g1, kitchen.dish(f"Side {i}", category=DishCategory.side), 1 + i % 3)
    for i in range(3):
        kitchen.rank(g1, kitchen.dish(f"Main {i}"), 2)

    menu = kitchen.menu()

    assert len(menu.side) == DEFAULT_MENU_LIMITS[DishCategory.side] == 4
    assert len(menu.main) == DEFAULT_MENU_LIMITS[DishCategory.main] == 2


def test_safe_filter_runs_before_limit(kitchen):
    g1 = kitchen.guest("G1", allergies=[Allergy.fish])
    best = kitchen.dish("Salmon", category=DishCategory.dessert, allergens=[Allergy.fish])
    runner_up = kitchen.dish("Sorbet", category=DishCategory.dessert)
    kitchen.rank(g1, best, 3)
    kitchen.rank(g1, runner_up, 1)

    assert _ids(kitchen.menu().dessert) == [runner_up.id]
    assert _ids(kitchen.menu(include_unsafe=True).dessert) == [best.id]


def test_explicit_limits_override_defaults(kitchen):
    g1 = kitchen.guest("G1")
    for i in range(3):
        kitchen.rank(g1, kitchen.dish(f"Main {i}"), 3)

    menu = kitchen.menu(limits={DishCategory.main: 0, DishCategory.side: None})
    assert menu.main == []

    menu = kitchen.menu(limits={DishCategory.main: 10})
    assert len(menu.main) == 3


def test_menu_changes_when_guest_is_uninvited(kitchen, db_session):
    g1 = kitchen.guest("G1", allergies=[Allergy.soy])
    g2 = kitchen.guest("G2")
    tofu = kitchen.dish("Tofu", allergens=[Allergy.soy])
    kitchen.rank(g2, tofu, 2)

    assert kitchen.menu().main == []

    db_session.delete(db_session.get(MealGuest, (kitchen.meal.id, g1.id)))
    db_session.commit()

    assert _ids(kitchen.menu().main) == [tofu.id]


def test_resolve_limits():
    assert resolve_limits() == DEFAULT_MENU_LIMITS
    assert resolve_limits({DishCategory.side: 0})[DishCategory.side] == 0
    assert resolve_limits({DishCategory.main: None})[DishCategory.main] == 2
    with pytest.raises(ValueError):
        resolve_limits({DishCategory.main: -1})
