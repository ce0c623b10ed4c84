from collections import Counter
from datetime import date

import pytest

from domain.errors import DecodeError
from domain.plan import create_plan
from domain.shopping import IngredientQuantity, ShoppingList, aggregate_shopping_list

from conftest import make_recipe


def planned(*recipes):
    plan = create_plan("Week", date(2026, 5, 4), days=2)
    slots = [slot for _, slot in plan.slots()]
    for slot, recipe in zip(slots, recipes):
        slot.recipe = recipe
    return plan


def test_same_ingredient_is_merged() -> None:
    plan = planned(
        make_recipe(1, (42, "milk", 1.5, "cup")),
        make_recipe(2, (42, "milk", 2.5, "cup")),
    )
    shopping_list = aggregate_shopping_list(plan)
    assert shopping_list.items == [
        IngredientQuantity(ingredient_id=42, name="milk", unit="cup", amount=4.0)
    ]


def test_empty_slots_contribute_nothing() -> None:
    plan = planned(None, make_recipe(1, (7, "egg", 2, "")), None)
    shopping_list = aggregate_shopping_list(plan)
    assert [(i.ingredient_id, i.amount) for i in shopping_list.items] == [(7, 2)]


def test_empty_plan_gives_empty_list() -> None:
    shopping_list = aggregate_shopping_list(planned())
    assert shopping_list.items == []
    assert shopping_list.name == "Shopping List for Week"


def test_aggregation_is_repeatable() -> None:
    plan = planned(
        make_recipe(1, (1, "flour", 0.1, "kg"), (2, "sugar", 0.2, "kg")),
        make_recipe(2, (1, "flour", 0.2, "kg")),
        make_recipe(3, (3, "butter", 100, "g"), (2, "sugar", 0.3, "kg")),
    )
    first = aggregate_shopping_list(plan)
    second = aggregate_shopping_list(plan)
    assert Counter(first.items) == Counter(second.items)
    assert first.source_plan is plan


def test_aggregation_does_not_touch_recipes() -> None:
    recipe = make_recipe(1, (42, "milk", 1.5, "cup"))
    plan = planned(recipe, recipe)
    aggregate_shopping_list(plan)
    aggregate_shopping_list(plan)
    assert recipe.extended_ingredients[0].amount == 1.5


@pytest.fixture
def shopping_list() -> ShoppingList:
    return ShoppingList(
        name="Groceries",
        items=[
            IngredientQuantity(ingredient_id=2, name="rice", unit="g", amount=500),
            IngredientQuantity(ingredient_id=1, name="apples", unit="", amount=3),
        ],
    )


def test_manage_items(shopping_list: ShoppingList) -> None:
    shopping_list.add_item(
        IngredientQuantity(ingredient_id=3, name="yoghurt", unit="ml", amount=250),
        notes="greek",
    )
    shopping_list.update_quantity(2, 750)
    assert shopping_list.toggle_completed(1) is True
    assert shopping_list.toggle_completed(1) is False
    shopping_list.remove_item(3)

    assert [i.ingredient_id for i in shopping_list.items] == [2, 1]
    assert shopping_list.item(2).amount == 750
    assert shopping_list.notes == {}
    with pytest.raises(KeyError):
        shopping_list.update_quantity(3, 1)


def test_export_as_text(shopping_list: ShoppingList) -> None:
    shopping_list.toggle_completed(2)
    shopping_list.update_notes(1, "green ones")
    assert shopping_list.export_as_text() == (
        "Groceries\n"
        "\n"
        "☐ apples - 3 \n"
        "   Note: green ones\n"
        "☑ rice - 500 g\n"
    )


def test_shopping_list_round_trips_through_dict(shopping_list: ShoppingList) -> None:
    shopping_list.toggle_completed(1)
    shopping_list.update_notes(2, "basmati")
    got = ShoppingList.from_dict(shopping_list.to_dict())
    assert got.items == shopping_list.items
    assert got.completed == {1}
    assert got.notes == {2: "basmati"}


@pytest.mark.parametrize("notes", (["basmati"], "basmati", 3))
def test_malformed_notes_are_decode_errors(shopping_list: ShoppingList, notes: object) -> None:
    data = shopping_list.to_dict()
    data["notes"] = notes
    with pytest.raises(DecodeError):
        ShoppingList.from_dict(data)
