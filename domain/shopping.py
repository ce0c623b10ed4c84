"""Shopping lists derived from the recipes of a plan."""
import uuid

from domain.codec import Value
from domain.errors import DecodeError
from domain.plan import Plan


class IngredientQuantity:
    def __init__(self, *, ingredient_id: int, name: str, unit: str, amount: float) -> None:
        self.ingredient_id = ingredient_id
        self.name = name
        self.unit = unit
        self.amount = amount

    def __repr__(self) -> str:
        return f"<IngredientQuantity({self.ingredient_id}, {self.amount} {self.unit} {self.name})>"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IngredientQuantity):
            return NotImplemented
        return self.key() == other.key()

    def __hash__(self) -> int:
        return hash(self.key())

    def key(self) -> tuple[int, str, str, float]:
        return self.ingredient_id, self.name, self.unit, self.amount

    def to_dict(self) -> dict[str, Value]:
        return {
            "ingredientId": self.ingredient_id,
            "name": self.name,
            "unit": self.unit,
            "amount": self.amount,
        }


class ShoppingList:
    def __init__(
        self,
        *,
        name: str,
        items: list[IngredientQuantity] | None = None,
        source_plan: Plan | None = None,
        id: str | None = None,
    ) -> None:
        self.id = uuid.uuid4().hex if id is None else id
        self.name = name
        self.items = items or []
        self.source_plan = source_plan
        self.completed: set[int] = set()
        self.notes: dict[int, str] = {}

    def __repr__(self) -> str:
        return f"<ShoppingList(name={self.name}, items={len(self.items)})>"

    def item(self, ingredient_id: int) -> IngredientQuantity:
        for item in self.items:
            if item.ingredient_id == ingredient_id:
                return item
        raise KeyError(ingredient_id)

    def add_item(self, item: IngredientQuantity, notes: str | None = None) -> None:
        self.items.append(item)
        if notes:
            self.notes[item.ingredient_id] = notes

    def remove_item(self, ingredient_id: int) -> None:
        self.items = [i for i in self.items if i.ingredient_id != ingredient_id]
        self.completed.discard(ingredient_id)
        self.notes.pop(ingredient_id, None)

    def toggle_completed(self, ingredient_id: int) -> bool:
        self.item(ingredient_id)
        if ingredient_id in self.completed:
            self.completed.remove(ingredient_id)
            return False
        self.completed.add(ingredient_id)
        return True

    def update_quantity(self, ingredient_id: int, amount: float) -> None:
        self.item(ingredient_id).amount = amount

    def update_notes(self, ingredient_id: int, notes: str | None) -> None:
        self.item(ingredient_id)
        if notes:
            self.notes[ingredient_id] = notes
        else:
            self.notes.pop(ingredient_id, None)

    def export_as_text(self) -> str:
        lines = [self.name, ""]
        for item in sorted(self.items, key=lambda i: i.name):
            checkmark = "☑ " if item.ingredient_id in self.completed else "☐ "
            lines.append(f"{checkmark}{item.name} - {item.amount} {item.unit}")
            if note := self.notes.get(item.ingredient_id):
                lines.append(f"   Note: {note}")
        return "\n".join(lines) + "\n"

    def to_dict(self) -> dict[str, Value]:
        return {
            "id": self.id,
            "name": self.name,
            "planId": None if self.source_plan is None else self.source_plan.id,
            "items": [i.to_dict() for i in self.items],
            "completed": sorted(self.completed),
            "notes": {str(k): v for k, v in self.notes.items()},
        }

    @classmethod
    def from_dict(cls, data: Value) -> "ShoppingList":
        if not isinstance(data, dict):
            raise DecodeError("shopping list is not a mapping")
        try:
            shopping_list = cls(
                id=str(data["id"]),
                name=str(data["name"]),
                items=[
                    IngredientQuantity(
                        ingredient_id=int(i["ingredientId"]),
                        name=str(i["name"]),
                        unit=str(i["unit"]),
                        amount=float(i["amount"]),
                    )
                    for i in data["items"]
                ],
            )
            shopping_list.completed = {int(i) for i in data.get("completed") or []}
            notes = data.get("notes") or {}
            if not isinstance(notes, dict):
                raise DecodeError("shopping list notes are not a mapping")
            shopping_list.notes = {int(k): str(v) for k, v in notes.items()}
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise DecodeError(f"malformed shopping list: {e}") from e
        return shopping_list


def aggregate_shopping_list(plan: Plan) -> ShoppingList:
    """Sum the ingredient amounts of every recipe in `plan`, one item per ingredient id.

    Units are taken from the first occurrence of an ingredient, they are not
    converted.
    """
    totals: dict[int, IngredientQuantity] = {}
    for recipe in plan.recipes():
        for ingredient in recipe.extended_ingredients:
            existing = totals.get(ingredient.id)
            if existing is None:
                totals[ingredient.id] = IngredientQuantity(
                    ingredient_id=ingredient.id,
                    name=ingredient.name,
                    unit=ingredient.unit,
                    amount=ingredient.amount,
                )
            else:
                existing.amount += ingredient.amount

    return ShoppingList(
        name=f"Shopping List for {plan.name}",
        items=list(totals.values()),
        source_plan=plan,
    )
