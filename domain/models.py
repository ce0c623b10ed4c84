from typing import Any

from domain.codec import Value
from domain.errors import DecodeError


def _field(data: Value, name: str, kind: type | tuple[type, ...], *, optional: bool = False) -> Any:
    if not isinstance(data, dict):
        raise DecodeError(f"expected a mapping holding {name!r}")
    value = data.get(name)
    if value is None and optional:
        return None
    # bool is an int, but never a valid amount or id.
    if isinstance(value, bool) and bool not in (kind if isinstance(kind, tuple) else (kind,)):
        raise DecodeError(f"field {name!r} has the wrong type")
    if not isinstance(value, kind):
        raise DecodeError(f"field {name!r} is missing or has the wrong type")
    return value


def _strings(data: Value, name: str) -> list[str]:
    values = _field(data, name, list, optional=True) or []
    return [v for v in values if isinstance(v, str)]


class Ingredient:
    def __init__(
        self,
        *,
        id: int,
        name: str,
        amount: float,
        unit: str,
        original: str = "",
        image: str | None = None,
    ) -> None:
        self.id = id
        self.name = name
        self.amount = amount
        self.unit = unit
        self.original = original
        self.image = image

    def __repr__(self) -> str:
        return f"<Ingredient(id={self.id}, name={self.name})>"

    def to_dict(self) -> dict[str, Value]:
        return {
            "id": self.id,
            "name": self.name,
            "amount": self.amount,
            "unit": self.unit,
            "original": self.original,
            "image": self.image,
        }

    @classmethod
    def from_dict(cls, data: Value) -> "Ingredient":
        return cls(
            id=_field(data, "id", int),
            name=_field(data, "name", str),
            amount=float(_field(data, "amount", (int, float))),
            unit=_field(data, "unit", str, optional=True) or "",
            original=_field(data, "original", str, optional=True) or "",
            image=_field(data, "image", str, optional=True),
        )


class Recipe:
    def __init__(
        self,
        *,
        id: int,
        title: str,
        summary: str = "",
        ready_in_minutes: int = 0,
        servings: int = 0,
        source_url: str | None = None,
        image: str | None = None,
        image_type: str | None = None,
        instructions: str | None = None,
        extended_ingredients: list[Ingredient] | None = None,
        diets: list[str] | None = None,
        dish_types: list[str] | None = None,
        cuisines: list[str] | None = None,
        is_favorite: bool = False,
    ) -> None:
        self.id = id
        self.title = title
        self.summary = summary
        self.ready_in_minutes = ready_in_minutes
        self.servings = servings
        self.source_url = source_url
        self.image = image
        self.image_type = image_type
        self.instructions = instructions
        self.extended_ingredients = extended_ingredients or []
        self.diets = diets or []
        self.dish_types = dish_types or []
        self.cuisines = cuisines or []
        self.is_favorite = is_favorite

    def __repr__(self) -> str:
        return f"<Recipe(id={self.id}, title={self.title})>"

    def to_dict(self) -> dict[str, Value]:
        return {
            "id": self.id,
            "title": self.title,
            "summary": self.summary,
            "readyInMinutes": self.ready_in_minutes,
            "servings": self.servings,
            "sourceUrl": self.source_url,
            "image": self.image,
            "imageType": self.image_type,
            "instructions": self.instructions,
            "extendedIngredients": [i.to_dict() for i in self.extended_ingredients],
            "diets": list(self.diets),
            "dishTypes": list(self.dish_types),
            "cuisines": list(self.cuisines),
            "isFavorite": self.is_favorite,
        }

    @classmethod
    def from_dict(cls, data: Value) -> "Recipe":
        ingredients = _field(data, "extendedIngredients", list, optional=True) or []
        return cls(
            id=_field(data, "id", int),
            title=_field(data, "title", str),
            summary=_field(data, "summary", str, optional=True) or "",
            ready_in_minutes=_field(data, "readyInMinutes", int, optional=True) or 0,
            servings=_field(data, "servings", int, optional=True) or 0,
            source_url=_field(data, "sourceUrl", str, optional=True),
            image=_field(data, "image", str, optional=True),
            image_type=_field(data, "imageType", str, optional=True),
            instructions=_field(data, "instructions", str, optional=True),
            extended_ingredients=[Ingredient.from_dict(i) for i in ingredients],
            diets=_strings(data, "diets"),
            dish_types=_strings(data, "dishTypes"),
            cuisines=_strings(data, "cuisines"),
            is_favorite=bool(_field(data, "isFavorite", bool, optional=True)),
        )


class SearchResults:
    def __init__(
        self,
        *,
        results: list[Recipe],
        offset: int = 0,
        number: int = 0,
        total_results: int = 0,
    ) -> None:
        self.results = results
        self.offset = offset
        self.number = number
        self.total_results = total_results

    def to_dict(self) -> dict[str, Value]:
        return {
            "results": [r.to_dict() for r in self.results],
            "offset": self.offset,
            "number": self.number,
            "totalResults": self.total_results,
        }

    @classmethod
    def from_dict(cls, data: Value) -> "SearchResults":
        return cls(
            results=[Recipe.from_dict(r) for r in _field(data, "results", list)],
            offset=_field(data, "offset", int, optional=True) or 0,
            number=_field(data, "number", int, optional=True) or 0,
            total_results=_field(data, "totalResults", int, optional=True) or 0,
        )
