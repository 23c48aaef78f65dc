# tests/test_validation.py
import pytest

from products_api.core import validate_create, validate_update
from products_api.errors import ValidationError


def test_create_returns_only_product_fields():
    fields = validate_create({"name": "Pen", "price": "1.5", "category": "Stationery", "extra": 1})
    assert fields == {"name": "Pen", "price": 1.5, "category": "Stationery"}


def test_create_accepts_zero_price():
    assert validate_create({"name": "Free", "price": 0, "category": "x"})["price"] == 0


@pytest.mark.parametrize("body, message", [
    ({"price": 1, "category": "x"}, "name: Product name is required"),
    ({"name": "", "price": 1, "category": "x"}, "name: Product name is required"),
    ({"name": "a", "price": None, "category": "x"}, "price: Product price is required"),
    ({"name": "a", "price": 1, "category": ""}, "category: Product category is required"),
    ({"name": "a", "price": -1, "category": "x"}, "price: Price cannot be negative"),
    ({"name": "a", "price": "abc", "category": "x"}, 'price: Cast to Number failed for value "abc" at path "price"'),
    ({"name": ["a"], "price": 1, "category": "x"}, "name: Cast to String failed for value \"['a']\" at path \"name\""),
])
def test_create_messages(body, message):
    with pytest.raises(ValidationError) as exc:
        validate_create(body)
    assert exc.value.message == f"Product validation failed: {message}"


def test_create_rejects_non_finite_price():
    with pytest.raises(ValidationError) as exc:
        validate_create({"name": "a", "price": float("inf"), "category": "x"})
    assert "Cast to Number failed" in exc.value.message


def test_create_rejects_non_object():
    with pytest.raises(ValidationError) as exc:
        validate_create(["a", 1, "x"])
    assert exc.value.message == "Product validation failed: request body must be a JSON object"


def test_update_keeps_only_supplied_fields():
    assert validate_update({"price": 2}) == {"price": 2.0}
    assert validate_update({"name": "Pencil", "colour": "red"}) == {"name": "Pencil"}
    assert validate_update({}) == {}


def test_update_messages_use_update_prefix():
    with pytest.raises(ValidationError) as exc:
        validate_update({"category": None, "price": -2})
    assert exc.value.message == (
        "Validation failed: price: Price cannot be negative, category: Product category is required"
    )


def test_numbers_are_accepted_as_text():
    fields = validate_create({"name": 123, "price": 1, "category": 4.5})
    assert fields == {"name": "123", "price": 1.0, "category": "4.5"}
    assert validate_update({"name": 7}) == {"name": "7"}
