import logging
from typing import Any, Protocol

from ajolt import in_thread
from domain.cache import CacheStore
from domain.codec import Shape
from domain.models import Recipe, SearchResults
from domain.recipe_api import RecipeAPI


logger = logging.getLogger(__name__)


SEARCH_TTL = 60 * 60
DETAIL_TTL = 60 * 60 * 24


class Fingerprint:
    """The semantic parameters of a recipe search."""

    def __init__(
        self,
        *,
        query: str = "",
        cuisine: str | None = None,
        diet: str | None = None,
        intolerances: str | None = None,
        max_ready_time: int | None = None,
        meal_type: str | None = None,
    ) -> None:
        self.query = query
        self.cuisine = cuisine
        self.diet = diet
        self.intolerances = intolerances
        self.max_ready_time = max_ready_time
        self.meal_type = meal_type

    def __repr__(self) -> str:
        return f"<Fingerprint({self.cache_key()})>"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Fingerprint):
            return NotImplemented
        return self.cache_key() == other.cache_key()

    def __hash__(self) -> int:
        return hash(self.cache_key())

    def cache_key(self, number: int = 1, offset: int = 0) -> str:
        parts = [
            self.query,
            self.cuisine or "",
            self.diet or "",
            self.intolerances or "",
            self.meal_type or "",
            "" if self.max_ready_time is None else str(self.max_ready_time),
            str(number),
            str(offset),
        ]
        return "search_" + "_".join(parts)


class RecipeSource(Protocol):
    async def search(
        self,
        fingerprint: Fingerprint,
        *,
        number: int = 1,
        offset: int = 0,
    ) -> list[Recipe]:
        ...


class FavoriteStore(Protocol):
    async def save(self, recipe: Recipe) -> None:
        ...

    async def get(self, id: int) -> Recipe | None:
        ...

    async def list(self) -> tuple[Recipe, ...]:
        ...

    async def remove(self, id: int) -> None:
        ...


class RecipeRepository:
    """Recipe API calls with the cache in front of them.

    Favorites, when a store for them is passed, are looked up before the
    cache and never expire.
    """

    def __init__(
        self,
        *,
        api: RecipeAPI,
        cache: CacheStore,
        favorites: FavoriteStore | None = None,
        search_ttl: float = SEARCH_TTL,
        detail_ttl: float = DETAIL_TTL,
    ) -> None:
        self.api = api
        self.cache = cache
        self.favorites = favorites
        self.search_ttl = search_ttl
        self.detail_ttl = detail_ttl

    def _favorite_store(self) -> FavoriteStore:
        if self.favorites is None:
            raise ValueError("This repository has no favorites store.")
        return self.favorites

    async def _cached(self, key: str, shape: Shape) -> Any | None:
        return await in_thread(self.cache.get, key, shape)

    async def _store(self, key: str, value: Any, ttl: float) -> None:
        await in_thread(self.cache.put, key, value, ttl)

    async def search(
        self,
        fingerprint: Fingerprint,
        *,
        number: int = 1,
        offset: int = 0,
    ) -> list[Recipe]:
        key = fingerprint.cache_key(number, offset)
        cached: SearchResults | None = await self._cached(key, SearchResults.from_dict)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return cached.results

        results = await self.api.search_recipes(
            fingerprint.query,
            cuisine=fingerprint.cuisine,
            diet=fingerprint.diet,
            intolerances=fingerprint.intolerances,
            max_ready_time=fingerprint.max_ready_time,
            meal_type=fingerprint.meal_type,
            number=number,
            offset=offset,
        )
        await self._store(key, results, self.search_ttl)
        return results.results

    async def search_recipes(
        self,
        query: str,
        *,
        cuisine: str | None = None,
        diet: str | None = None,
        intolerances: str | None = None,
        max_ready_time: int | None = None,
        number: int = 20,
        offset: int = 0,
    ) -> list[Recipe]:
        fingerprint = Fingerprint(
            query=query,
            cuisine=cuisine,
            diet=diet,
            intolerances=intolerances,
            max_ready_time=max_ready_time,
        )
        return await self.search(fingerprint, number=number, offset=offset)

    async def get_recipe_detail(self, id: int) -> Recipe:
        if self.favorites is not None:
            favorite = await self.favorites.get(id)
            if favorite is not None:
                return favorite

        key = f"recipe_{id}"
        cached: Recipe | None = await self._cached(key, Recipe.from_dict)
        if cached is not None:
            return cached

        recipe = await self.api.get_recipe_information(id)
        await self._store(key, recipe, self.detail_ttl)
        return recipe

    async def get_random_recipes(
        self,
        number: int = 10,
        tags: list[str] | None = None,
    ) -> list[Recipe]:
        return await self.api.get_random_recipes(number=number, tags=tags)

    async def save_recipe_as_favorite(self, recipe: Recipe) -> None:
        await self._favorite_store().save(recipe)
        logger.info("Saved recipe %s as favorite", recipe.id)

    async def remove_recipe_from_favorites(self, recipe: Recipe) -> None:
        await self._favorite_store().remove(recipe.id)
        recipe.is_favorite = False
        logger.info("Removed recipe %s from favorites", recipe.id)

    async def get_favorite_recipes(self) -> list[Recipe]:
        return list(await self._favorite_store().list())
