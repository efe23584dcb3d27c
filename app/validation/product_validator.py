from collections.abc import Mapping, Sequence
from typing import Any
from pydantic import ValidationError
from app.schemas.product import ProductCreate
from app.validation.rules import check_category_fields, category_rules_document

ErrorMap = dict[str, list[str]]

FIELD_ALIASES = {
    "is_active": "isActive",
    "is_featured": "isFeatured",
}

# Pydantic error type -> user-facing message, per wire field. Templates are
# formatted with the error's ``ctx``.
FIELD_MESSAGES: dict[str, dict[str, str]] = {
    "name": {
        "missing": "Product name is required",
        "string_type": "Product name is required",
        "string_too_short": "Product name must be at least {min_length} characters",
        "string_too_long": "Product name cannot exceed {max_length} characters",
        "string_pattern_mismatch": "Product name can only contain letters, numbers, spaces, and basic punctuation",
    },
    "brand": {
        "missing": "Brand name is required",
        "string_type": "Brand name is required",
        "string_too_short": "Brand name must be at least {min_length} characters",
        "string_too_long": "Brand name cannot exceed {max_length} characters",
    },
    "seller": {
        "missing": "Seller name is required",
        "string_type": "Seller name is required",
        "string_too_short": "Seller name must be at least {min_length} characters",
        "string_too_long": "Seller name cannot exceed {max_length} characters",
    },
    "product_description": {
        "missing": "Product description is required",
        "string_type": "Product description is required",
        "string_too_short": "Description must be at least {min_length} characters",
        "string_too_long": "Description cannot exceed {max_length} characters",
    },
    "price": {
        "missing": "Price is required",
        "float_type": "Price must be a valid number",
        "float_parsing": "Price must be a valid number",
        "greater_than_equal": "Price cannot be negative",
        "less_than_equal": "Price cannot exceed ₹999,999.99",
    },
    "discount": {
        "float_type": "Discount must be a valid number",
        "float_parsing": "Discount must be a valid number",
        "greater_than_equal": "Discount cannot be less than 0%",
        "less_than_equal": "Discount cannot exceed 100%",
    },
    "ratings": {
        "float_type": "Rating must be a valid number",
        "float_parsing": "Rating must be a valid number",
        "greater_than_equal": "Rating must be between 0 and 5",
        "less_than_equal": "Rating must be between 0 and 5",
    },
    "cod_availability": {
        "missing": "COD availability is required",
        "bool_type": "COD availability must be true or false",
        "bool_parsing": "COD availability must be true or false",
    },
    "total_stock_availability": {
        "missing": "Stock availability is required",
        "int_type": "Stock must be a valid number",
        "int_parsing": "Stock must be a valid number",
        "int_from_float": "Stock must be a whole number",
        "greater_than_equal": "Stock cannot be negative",
        "less_than_equal": "Stock cannot exceed 999,999 units",
    },
    "category": {
        "missing": "Category is required",
        "string_type": "Category must be one of: electronics, clothing, or others",
        "literal_error": "Category must be one of: electronics, clothing, or others",
    },
    "colors": {
        "missing": "Colors are required",
        "list_type": "Colors must be an array",
        "too_short": "At least one color is required",
        "string_type": "Color name must be a string",
        "string_too_short": "Color name must be at least {min_length} characters",
        "string_too_long": "Color name cannot exceed {max_length} characters",
    },
    "variants": {
        "list_type": "Variants must be an array",
        "string_type": "Variant must be a string",
        "string_too_short": "Variant must be at least {min_length} characters",
        "string_too_long": "Variant cannot exceed {max_length} characters",
    },
    "size": {
        "list_type": "Sizes must be an array",
        "string_type": "Size must be a string",
        "string_too_short": "Size must be at least {min_length} characters",
        "string_too_long": "Size cannot exceed {max_length} characters",
    },
    "isActive": {
        "missing": "Status is required",
        "bool_type": "Status must be true or false",
        "bool_parsing": "Status must be true or false",
    },
    "isFeatured": {
        "bool_type": "Featured flag must be true or false",
        "bool_parsing": "Featured flag must be true or false",
    },
}

_LOCATIONS = {"body", "query", "path", "header", "cookie"}


def merge_errors(target: ErrorMap, source: Mapping[str, Sequence[str]]) -> ErrorMap:
    for field, messages in source.items():
        bucket = target.setdefault(field, [])
        for message in messages:
            if message not in bucket:
                bucket.append(message)
    return target


def field_key(loc: Sequence[Any]) -> str:
    parts = [part for part in loc if isinstance(part, str) and part not in _LOCATIONS]
    if not parts:
        return "general"
    return FIELD_ALIASES.get(parts[0], parts[0])


def error_message(field: str, error: Mapping[str, Any]) -> str:
    template = FIELD_MESSAGES.get(field, {}).get(error["type"])
    if template is None:
        return error["msg"]
    return template.format(**error.get("ctx", {}))


def format_validation_errors(errors: Sequence[Mapping[str, Any]]) -> ErrorMap:
    """Group pydantic error dicts into ``{field: [message, ...]}``."""
    grouped: ErrorMap = {}
    for error in errors:
        field = field_key(error["loc"])
        merge_errors(grouped, {field: [error_message(field, error)]})
    return grouped


def validate_product(payload: Any) -> tuple[ProductCreate | None, ErrorMap]:
    """Run the field rules and the category rules on a candidate product.

    Every failure is collected; a bad field never hides a category error.
    Name uniqueness needs a store read and is left to the caller.
    """
    if not isinstance(payload, Mapping):
        return None, {"general": ["Request body must be a product object"]}

    errors: ErrorMap = {}
    product = None
    try:
        product = ProductCreate.model_validate(payload)
    except ValidationError as exc:
        merge_errors(errors, format_validation_errors(exc.errors()))

    record = product.to_record() if product is not None else payload
    merge_errors(errors, check_category_fields(record))

    if errors:
        return None, errors
    return product, {}


def rules_document() -> dict[str, Any]:
    schema = ProductCreate.model_json_schema(by_alias=True)
    return {
        "fields": schema["properties"],
        "required": schema.get("required", []),
        "categories": category_rules_document(),
        "messages": FIELD_MESSAGES,
    }
