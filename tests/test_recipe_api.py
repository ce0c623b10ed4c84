from typing import Any, Callable

import httpx
import pytest

from domain.errors import (
    AuthError,
    DecodeError,
    RateLimitError,
    ServerError,
    TransportError,
)
from domain.recipe_api import RecipeAPI


RECIPE = {
    "id": 716429,
    "title": "Pasta with Garlic, Scallions, Cauliflower & Breadcrumbs",
    "summary": "A quick pasta.",
    "readyInMinutes": 45,
    "servings": 2,
    "sourceUrl": "https://example.com/pasta",
    "image": "https://example.com/pasta.jpg",
    "imageType": "jpg",
    "extendedIngredients": [
        {
            "id": 1001,
            "name": "butter",
            "amount": 1,
            "unit": "tbsp",
            "original": "1 tbsp butter",
            "image": "butter.png",
        },
        {
            "id": 10011135,
            "name": "cauliflower florets",
            "amount": 2.0,
            "unit": "cups",
            "original": "about 2 cups frozen cauliflower florets",
        },
    ],
    "diets": [],
    "dishTypes": ["lunch", "main course"],
    "cuisines": [],
}


def make_api(handler: Callable[[httpx.Request], httpx.Response]) -> RecipeAPI:
    client = httpx.AsyncClient(
        base_url="https://api.spoonacular.com",
        transport=httpx.MockTransport(handler),
    )
    return RecipeAPI(http_client=client, api_key="secret")


def respond(body: Any, status: int = 200) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json=body)

    return handler


@pytest.mark.asyncio
async def test_search_recipes_sends_filters() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={"results": [RECIPE], "offset": 0, "number": 1, "totalResults": 86},
        )

    api = make_api(handler)
    results = await api.search_recipes(
        "pasta",
        diet="vegetarian",
        meal_type="dinner",
        max_ready_time=30,
        number=1,
    )

    assert results.total_results == 86
    assert [r.id for r in results.results] == [716429]
    params = seen[0].url.params
    assert seen[0].url.path == "/recipes/complexSearch"
    assert params["query"] == "pasta"
    assert params["diet"] == "vegetarian"
    assert params["type"] == "dinner"
    assert params["maxReadyTime"] == "30"
    assert params["apiKey"] == "secret"
    assert "cuisine" not in params


@pytest.mark.asyncio
async def test_get_recipe_information() -> None:
    api = make_api(respond(RECIPE))
    recipe = await api.get_recipe_information(716429)
    assert recipe.servings == 2
    assert [i.id for i in recipe.extended_ingredients] == [1001, 10011135]
    assert recipe.extended_ingredients[0].amount == 1.0


@pytest.mark.asyncio
async def test_get_random_recipes_joins_tags() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"recipes": [RECIPE]})

    api = make_api(handler)
    recipes = await api.get_random_recipes(number=1, tags=["vegan", "dinner"])
    assert len(recipes) == 1
    assert seen[0].url.params["tags"] == "vegan,dinner"


@pytest.mark.parametrize(
    "status,error",
    (
        (401, AuthError),
        (429, RateLimitError),
        (404, ServerError),
        (500, ServerError),
    ),
)
@pytest.mark.asyncio
async def test_status_codes_map_to_errors(status: int, error: type[Exception]) -> None:
    api = make_api(respond({"message": "nope"}, status=status))
    with pytest.raises(error):
        await api.get_recipe_information(1)


@pytest.mark.asyncio
async def test_server_error_keeps_status() -> None:
    api = make_api(respond({}, status=503))
    with pytest.raises(ServerError) as exc:
        await api.get_recipe_information(1)
    assert exc.value.status == 503


@pytest.mark.asyncio
async def test_network_failure_is_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    api = make_api(handler)
    with pytest.raises(TransportError):
        await api.get_recipe_information(1)


@pytest.mark.asyncio
async def test_bad_body_is_decode_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>")

    api = make_api(handler)
    with pytest.raises(DecodeError):
        await api.get_recipe_information(1)

    api = make_api(respond({"title": "missing id"}))
    with pytest.raises(DecodeError):
        await api.get_recipe_information(1)


@pytest.mark.parametrize(
    "raised,error",
    (
        (httpx.TooManyRedirects, TransportError),
        (httpx.DecodingError, DecodeError),
        (httpx.ReadError, TransportError),
    ),
)
@pytest.mark.asyncio
async def test_request_errors_map_to_errors(
    raised: type[httpx.RequestError], error: type[Exception]
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise raised("failed", request=request)

    api = make_api(handler)
    with pytest.raises(error):
        await api.search_recipes("soup")
