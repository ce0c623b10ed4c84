"""Meal plans: days of meal slots waiting for a recipe each."""
from datetime import date, timedelta
from enum import Enum
from typing import Iterator
import uuid

from domain.codec import Value
from domain.errors import DecodeError
from domain.models import Recipe
from domain.repository import Fingerprint


class MealType(Enum):
    breakfast = "breakfast"
    lunch = "lunch"
    dinner = "dinner"
    snack = "snack"


class DietaryRestriction(Enum):
    vegan = "vegan"
    vegetarian = "vegetarian"
    gluten_free = "gluten-free"
    ketogenic = "ketogenic"
    paleo = "paleo"
    pescetarian = "pescetarian"
    whole30 = "whole30"
    dairy_free = "dairy-free"


DEFAULT_MEAL_TYPES = (MealType.breakfast, MealType.lunch, MealType.dinner)


class UserPreferences:
    def __init__(
        self,
        *,
        dietary_restrictions: list[DietaryRestriction] | None = None,
        allergies: list[str] | None = None,
        cuisine_preferences: list[str] | None = None,
        max_cooking_time: int | None = None,
        serving_size: int = 2,
    ) -> None:
        self.dietary_restrictions = dietary_restrictions or []
        self.allergies = allergies or []
        self.cuisine_preferences = cuisine_preferences or []
        self.max_cooking_time = max_cooking_time
        self.serving_size = serving_size


class MealSlot:
    def __init__(
        self,
        *,
        type: MealType,
        recipe: Recipe | None = None,
        id: str | None = None,
    ) -> None:
        self.id = uuid.uuid4().hex if id is None else id
        self.type = type
        self.recipe = recipe

    def __repr__(self) -> str:
        return f"<MealSlot(type={self.type.value}, recipe={self.recipe!r})>"

    def to_dict(self) -> dict[str, Value]:
        return {
            "id": self.id,
            "type": self.type.value,
            "recipe": None if self.recipe is None else self.recipe.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Value) -> "MealSlot":
        if not isinstance(data, dict):
            raise DecodeError("meal slot is not a mapping")
        recipe = data.get("recipe")
        return cls(
            id=str(data["id"]),
            type=MealType(data["type"]),
            recipe=None if recipe is None else Recipe.from_dict(recipe),
        )


class PlanDay:
    def __init__(self, *, date: date, meals: list[MealSlot] | None = None) -> None:
        self.date = date
        self.meals = meals or []

    def __repr__(self) -> str:
        return f"<PlanDay(date={self.date.isoformat()}, meals={len(self.meals)})>"

    def to_dict(self) -> dict[str, Value]:
        return {
            "date": self.date.isoformat(),
            "meals": [m.to_dict() for m in self.meals],
        }

    @classmethod
    def from_dict(cls, data: Value) -> "PlanDay":
        if not isinstance(data, dict):
            raise DecodeError("plan day is not a mapping")
        return cls(
            date=date.fromisoformat(str(data["date"])),
            meals=[MealSlot.from_dict(m) for m in data["meals"]],
        )


class Plan:
    """A named run of consecutive days. Dates are unique within a plan."""

    def __init__(
        self,
        *,
        name: str,
        days: list[PlanDay],
        id: str | None = None,
    ) -> None:
        dates = [d.date for d in days]
        if len(set(dates)) != len(dates):
            raise ValueError("A plan cannot hold the same date twice.")
        self.id = uuid.uuid4().hex if id is None else id
        self.name = name
        self.days = days

    def __repr__(self) -> str:
        return f"<Plan(id={self.id}, name={self.name})>"

    @property
    def date_range(self) -> tuple[date, date] | None:
        if not self.days:
            return None
        dates = [d.date for d in self.days]
        return min(dates), max(dates)

    def slots(self) -> Iterator[tuple[PlanDay, MealSlot]]:
        for day in self.days:
            for slot in day.meals:
                yield day, slot

    def recipes(self) -> Iterator[Recipe]:
        for _, slot in self.slots():
            if slot.recipe is not None:
                yield slot.recipe

    def slot(self, slot_id: str) -> MealSlot:
        for _, slot in self.slots():
            if slot.id == slot_id:
                return slot
        raise KeyError(slot_id)

    def replace_recipe(self, slot_id: str, recipe: Recipe | None) -> MealSlot:
        """Put `recipe` in one slot, leaving every other slot as it was."""
        slot = self.slot(slot_id)
        slot.recipe = recipe
        return slot

    def to_dict(self) -> dict[str, Value]:
        return {
            "id": self.id,
            "name": self.name,
            "days": [d.to_dict() for d in self.days],
        }

    @classmethod
    def from_dict(cls, data: Value) -> "Plan":
        if not isinstance(data, dict):
            raise DecodeError("plan is not a mapping")
        try:
            return cls(
                id=str(data["id"]),
                name=str(data["name"]),
                days=[PlanDay.from_dict(d) for d in data["days"]],
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise DecodeError(f"malformed plan: {e}") from e


def create_plan(
    name: str,
    start_date: date,
    days: int = 7,
    meal_types: tuple[MealType, ...] = DEFAULT_MEAL_TYPES,
) -> Plan:
    if days < 1:
        raise ValueError("A plan needs at least one day.")
    return Plan(
        name=name,
        days=[
            PlanDay(
                date=start_date + timedelta(days=i),
                meals=[MealSlot(type=t) for t in meal_types],
            )
            for i in range(days)
        ],
    )


def fingerprint_for(slot: MealSlot, preferences: UserPreferences) -> Fingerprint:
    diet = ",".join(r.value for r in preferences.dietary_restrictions)
    intolerances = ",".join(preferences.allergies)
    cuisine = preferences.cuisine_preferences[0] if preferences.cuisine_preferences else None
    return Fingerprint(
        cuisine=cuisine,
        diet=diet or None,
        intolerances=intolerances or None,
        max_ready_time=preferences.max_cooking_time,
        meal_type=slot.type.value,
    )
