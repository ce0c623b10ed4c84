import logging
from typing import Any

import httpx

from config import Config
from domain import codec
from domain.errors import (
    AuthError,
    DecodeError,
    RateLimitError,
    ServerError,
    TransportError,
)
from domain.models import Recipe, SearchResults


logger = logging.getLogger(__name__)


def api_client_factory(config: Config | None = None) -> httpx.AsyncClient:
    config = Config() if config is None else config
    return httpx.AsyncClient(
        base_url=config.api_base_url,
        headers={"Accept": "application/json"},
        timeout=config.api_timeout,
    )


def raise_for_status(resp: httpx.Response) -> None:
    status = resp.status_code
    if 200 <= status < 300:
        return
    if status == 401:
        raise AuthError("Recipe API rejected the api key.")
    if status == 429:
        raise RateLimitError("Recipe API rate limit exceeded.")
    raise ServerError(status)


class RecipeAPI:
    """Thin async client for the Spoonacular recipe endpoints."""

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient | None = None,
        api_key: str | None = None,
    ) -> None:
        config = Config() if http_client is None or api_key is None else None
        self.http_client = api_client_factory(config) if http_client is None else http_client
        self.api_key = config.spoonacular_api_key if api_key is None else api_key

    async def fetch(self, endpoint: str, params: dict[str, Any] | None = None) -> codec.Value:
        query = {k: v for k, v in (params or {}).items() if v is not None}
        query["apiKey"] = self.api_key
        try:
            resp = await self.http_client.get(endpoint, params=query)
        except httpx.DecodingError as e:
            raise DecodeError(f"{endpoint} returned an undecodable body: {e}") from e
        except httpx.RequestError as e:
            logger.warning("GET %s failed: %s", endpoint, e)
            raise TransportError(str(e)) from e

        raise_for_status(resp)

        try:
            return codec.interpret(resp.json())
        except ValueError as e:
            raise DecodeError(f"{endpoint} returned invalid json: {e}") from e

    async def search_recipes(
        self,
        query: str = "",
        *,
        cuisine: str | None = None,
        diet: str | None = None,
        intolerances: str | None = None,
        max_ready_time: int | None = None,
        meal_type: str | None = None,
        number: int = 20,
        offset: int = 0,
    ) -> SearchResults:
        data = await self.fetch(
            "/recipes/complexSearch",
            {
                "query": query,
                "cuisine": cuisine,
                "diet": diet,
                "intolerances": intolerances,
                "type": meal_type,
                "maxReadyTime": max_ready_time,
                "number": number,
                "offset": offset,
                "addRecipeInformation": "true",
                "fillIngredients": "true",
            },
        )
        return SearchResults.from_dict(data)

    async def get_recipe_information(self, id: int) -> Recipe:
        data = await self.fetch(f"/recipes/{id}/information")
        return Recipe.from_dict(data)

    async def get_random_recipes(
        self,
        number: int = 10,
        tags: list[str] | None = None,
    ) -> list[Recipe]:
        data = await self.fetch(
            "/recipes/random",
            {"number": number, "tags": ",".join(tags) if tags else None},
        )
        if not isinstance(data, dict) or not isinstance(data.get("recipes"), list):
            raise DecodeError("random recipes response has no recipe list")
        return [Recipe.from_dict(r) for r in data["recipes"]]
