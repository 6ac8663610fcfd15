from .allergies import ALLERGIES, Allergy, DishAllergen, GuestAllergy
from .dishes import DISH_CATEGORIES, Dish, DishCategory
from .guests import DishRank, Guest
from .meals import Meal, MealGuest
from .users import RefreshToken, User

__all__ = [
    "ALLERGIES",
    "Allergy",
    "DISH_CATEGORIES",
    "Dish",
    "DishAllergen",
    "DishCategory",
    "DishRank",
    "Guest",
    "GuestAllergy",
    "Meal",
    "MealGuest",
    "RefreshToken",
    "User",
]
