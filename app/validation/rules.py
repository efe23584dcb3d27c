"""Category-conditional field rules.

This table is the only place that knows which list fields a category needs.
The request validator, the ``Product`` mapper hook and the published rules
document all read it.
"""
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

CATEGORIES = ("electronics", "clothing", "others")


@dataclass(frozen=True)
class CategoryRule:
    required: tuple[str, ...] = ()
    forbidden: tuple[str, ...] = ()


CATEGORY_RULES: dict[str, CategoryRule] = {
    "electronics": CategoryRule(required=("variants",), forbidden=("size",)),
    "clothing": CategoryRule(required=("size",), forbidden=("variants",)),
    "others": CategoryRule(forbidden=("variants", "size")),
}

# Reported under "category": the category is what makes the field mandatory.
REQUIRED_MESSAGES = {
    "variants": "Variants are required for electronics category",
    "size": "Size is required for clothing category",
}

FORBIDDEN_MESSAGES = {
    "variants": "Variants are only allowed for electronics category",
    "size": "Sizes are only allowed for clothing category",
}

# Fields that must be non-empty whatever the category.
ALWAYS_REQUIRED = {
    "colors": "At least one color is required",
}


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, (list, tuple)) and len(value) == 0)


def check_category_fields(record: Mapping[str, Any]) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}

    for field, message in ALWAYS_REQUIRED.items():
        if _is_empty(record.get(field)):
            errors.setdefault(field, []).append(message)

    category = record.get("category")
    rule = CATEGORY_RULES.get(category) if isinstance(category, str) else None
    if rule is None:
        # unknown, missing or non-string category is reported by the field rules
        return errors

    for field in rule.required:
        if _is_empty(record.get(field)):
            errors.setdefault("category", []).append(REQUIRED_MESSAGES[field])

    for field in rule.forbidden:
        value = record.get(field)
        if isinstance(value, (list, tuple)) and value:
            errors.setdefault(field, []).append(FORBIDDEN_MESSAGES[field])

    return errors


def category_rules_document() -> dict[str, Any]:
    return {
        category: {
            "required": {field: REQUIRED_MESSAGES[field] for field in rule.required},
            "forbidden": {field: FORBIDDEN_MESSAGES[field] for field in rule.forbidden},
        }
        for category, rule in CATEGORY_RULES.items()
    } | {"*": {"required": dict(ALWAYS_REQUIRED), "forbidden": {}}}
