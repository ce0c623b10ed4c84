import pytest

from domain import codec
from domain.errors import DecodeError, EncodeError
from domain.models import Ingredient, Recipe


@pytest.mark.parametrize(
    "value",
    (
        None,
        True,
        False,
        0,
        -17,
        2**53 + 1,
        1.5,
        1.0,
        "",
        "béchamel",
        [],
        [1, 2.5, "three", None, False],
        {},
        {"a": {"b": [1, {"c": None}]}, "d": 0.25},
    ),
)
def test_round_trip(value: codec.Value) -> None:
    assert codec.decode(codec.encode(value)) == value


@pytest.mark.parametrize(
    "payload,expected_type",
    (
        (b"1", int),
        (b"1.0", float),
        (b"true", bool),
        (b"null", type(None)),
        (b'"1"', str),
    ),
)
def test_narrowest_shape_wins(payload: bytes, expected_type: type) -> None:
    assert type(codec.decode(payload)) is expected_type


def test_bool_is_not_read_as_int() -> None:
    got = codec.decode(b"[true, 1]")
    assert got == [True, 1]
    assert type(got[0]) is bool
    assert type(got[1]) is int


def test_interpret_rejects_unknown_shape() -> None:
    with pytest.raises(DecodeError) as exc:
        codec.interpret({1: "not a string key"})
    assert exc.value.reason == "unrecognized shape"


def test_decode_rejects_garbage() -> None:
    with pytest.raises(DecodeError):
        codec.decode(b"{not json")


def test_encode_rejects_unsupported_values() -> None:
    with pytest.raises(EncodeError):
        codec.encode({"when": object()})
    with pytest.raises(EncodeError):
        codec.encode(float("nan"))


def test_decode_with_shape() -> None:
    recipe = Recipe(
        id=7,
        title="Dal",
        extended_ingredients=[Ingredient(id=42, name="lentils", amount=1.5, unit="cup")],
    )
    got = codec.decode(codec.encode(recipe), Recipe.from_dict)
    assert isinstance(got, Recipe)
    assert got.to_dict() == recipe.to_dict()


def test_decode_with_shape_that_does_not_fit() -> None:
    with pytest.raises(DecodeError):
        codec.decode(codec.encode({"title": "no id"}), Recipe.from_dict)
