# products_api/core.py
from typing import Any, Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError

PRODUCT_FIELDS: Tuple[str, ...] = ("name", "price", "category")

CREATE_PREFIX = "Product validation failed"
UPDATE_PREFIX = "Validation failed"

REQUIRED_MESSAGES = {
    "name": "Product name is required",
    "price": "Product price is required",
    "category": "Product category is required",
}

CAST_TYPES = {"name": "String", "price": "Number", "category": "String"}

# ---------------------------
# Pydantic schemas
# ---------------------------
class ProductIn(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    name: str = Field(min_length=1)
    price: float = Field(ge=0, allow_inf_nan=False)
    category: str = Field(min_length=1)


class ProductUpdate(BaseModel):
    # Defaults are never validated, so an omitted field stays unset while an
    # explicit null fails the str/float check like any other bad value.
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    name: str = Field(default=None, min_length=1)
    price: float = Field(default=None, ge=0, allow_inf_nan=False)
    category: str = Field(default=None, min_length=1)


# ---------------------------
# Validation helpers
# ---------------------------
def _field_message(field: str, error: Dict[str, Any]) -> str:
    kind = error.get("type", "")
    value = error.get("input")
    if kind == "missing" or value is None or kind == "string_too_short":
        return REQUIRED_MESSAGES[field]
    if kind == "greater_than_equal":
        return "Price cannot be negative"
    return f'Cast to {CAST_TYPES[field]} failed for value "{value}" at path "{field}"'


def format_errors(exc: PydanticValidationError, prefix: str) -> str:
    """Render pydantic errors as ``"<prefix>: field: message, field: message"``."""
    per_field: Dict[str, str] = {}
    general: List[str] = []
    for error in exc.errors():
        loc = error.get("loc") or ()
        field = loc[0] if loc else None
        if field in PRODUCT_FIELDS:
            per_field.setdefault(field, _field_message(field, error))
        else:
            general.append("request body must be a JSON object")

    parts = [f"{field}: {per_field[field]}" for field in PRODUCT_FIELDS if field in per_field]
    parts.extend(dict.fromkeys(general))
    return f"{prefix}: {', '.join(parts)}"


def validate_create(data: Any) -> Dict[str, Any]:
    """Validate a full product body; returns the fields to insert."""
    try:
        product = ProductIn.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(format_errors(exc, CREATE_PREFIX)) from exc
    return product.model_dump()


def validate_update(data: Any) -> Dict[str, Any]:
    """Validate a partial product body; returns only the fields supplied."""
    try:
        update = ProductUpdate.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(format_errors(exc, UPDATE_PREFIX)) from exc
    return update.model_dump(include=set(update.model_fields_set))
