from pathlib import Path

import pytest

from domain.cache import CacheStore
from domain.models import Ingredient, Recipe
from domain.repository import Fingerprint


class FakeClock:
    def __init__(self, now: float = 1_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSource:
    """Recipe source answering from a queue of recipes, optionally failing."""

    def __init__(
        self,
        recipes: list[Recipe] | None = None,
        *,
        fail_on: set[str] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.recipes = list(recipes or [])
        self.fail_on = fail_on or set()
        self.error = error or RuntimeError("boom")
        self.calls: list[Fingerprint] = []
        self.offsets: list[int] = []

    async def search(
        self,
        fingerprint: Fingerprint,
        *,
        number: int = 1,
        offset: int = 0,
    ) -> list[Recipe]:
        self.calls.append(fingerprint)
        self.offsets.append(offset)
        if fingerprint.meal_type in self.fail_on:
            raise self.error
        if not self.recipes:
            return []
        return [self.recipes.pop(0)]


def make_recipe(id: int, *ingredients: tuple[int, str, float, str]) -> Recipe:
    return Recipe(
        id=id,
        title=f"Recipe {id}",
        summary="",
        ready_in_minutes=20,
        servings=2,
        extended_ingredients=[
            Ingredient(id=i, name=name, amount=amount, unit=unit)
            for i, name, amount, unit in ingredients
        ],
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "RecipeCache"


@pytest.fixture
def cache(cache_dir: Path, clock: FakeClock) -> CacheStore:
    return CacheStore(directory=cache_dir, clock=clock)
