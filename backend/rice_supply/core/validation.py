"""Validation Layer — per-field guards and the declarative schema evaluator.

Invariants:
    - None, a missing key, and "" are "absent": every rule except require_fields skips them
    - Booleans (including False) always count as present
    - Rules never mutate the payload; the first violated rule raises ValidationError
    - require_fields and require_identifier_shape list every offending field, not just the first

Design Decisions:
    - One plain function per rule, composed by validate_create / validate_update
      from an EntitySchema table: the five record kinds share one evaluator
    - Date parsing delegated to pydantic's datetime coercion (ISO 8601 strings,
      YYYY-MM-DD, unix timestamps) instead of a hand-written parser
"""

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from rice_supply.core.domain_types import EntityKind
from rice_supply.core.errors import ValidationError
from rice_supply.core.identity import is_record_id

MAX_SAFE_INTEGER = 2**53 - 1

_DATETIME = TypeAdapter(datetime)


def is_absent(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def _fmt_bound(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def to_number(value: Any) -> float | None:
    """Coerce a JSON value to a finite float, or None if it is not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


# ─── Rules ───────────────────────────────────────────────────────

def require_fields(payload: dict, names: Sequence[str]) -> None:
    missing = [name for name in names if is_absent(payload.get(name))]
    if missing:
        raise ValidationError(
            f"Missing required fields: {', '.join(missing)}", fields=missing,
        )


def require_identifier_shape(payload: dict, fields: Sequence[str]) -> None:
    invalid = [
        name for name in fields
        if not is_absent(payload.get(name)) and not is_record_id(payload[name])
    ]
    if invalid:
        raise ValidationError(
            f"Invalid identifier format in fields: {', '.join(invalid)}",
            fields=invalid,
        )


def require_enum(payload: dict, field: str, allowed: Sequence[str]) -> None:
    value = payload.get(field)
    if is_absent(value):
        return
    if not isinstance(value, str) or value not in allowed:
        raise ValidationError(
            f"Invalid {field}. Must be one of: {', '.join(allowed)}",
            fields=[field],
        )


def require_array_bound(payload: dict, field: str, max_len: int) -> None:
    value = payload.get(field)
    if is_absent(value):
        return
    if not isinstance(value, list) or len(value) > max_len:
        raise ValidationError(
            f"{field} must be an array with maximum {max_len} items",
            fields=[field],
        )


def require_numeric_range(
    payload: dict, field: str,
    minimum: float = 0, maximum: float = MAX_SAFE_INTEGER,
) -> None:
    value = payload.get(field)
    if is_absent(value):
        return
    number = to_number(value)
    if number is None or number < minimum or number > maximum:
        raise ValidationError(
            f"{field} must be a number between "
            f"{_fmt_bound(minimum)} and {_fmt_bound(maximum)}",
            fields=[field],
        )


def require_parseable_date(payload: dict, field: str) -> None:
    value = payload.get(field)
    if is_absent(value):
        return
    try:
        _DATETIME.validate_python(value)
    except PydanticValidationError:
        raise ValidationError(f"{field} must be a valid date", fields=[field])


def require_boolean(payload: dict, field: str) -> None:
    value = payload.get(field)
    if is_absent(value):
        return
    if not isinstance(value, bool):
        raise ValidationError(f"{field} must be a boolean", fields=[field])


# ─── Declarative schema ──────────────────────────────────────────

class FieldKind(str, Enum):
    """How a field is checked. TEXT fields are accepted as-is."""
    TEXT = "text"
    NUMBER = "number"
    REFERENCE = "reference"
    ENUM = "enum"
    LIST = "list"
    DATE = "date"
    BOOLEAN = "boolean"


@dataclass(frozen=True)
class FieldRule:
    """One entry in an entity's field table.

    `creatable=False` marks server-managed fields: ignored on create (always
    seeded from `default`), accepted on update.
    """
    name: str
    kind: FieldKind = FieldKind.TEXT
    required: bool = False
    choices: tuple[str, ...] = ()
    minimum: float = 0
    maximum: float = MAX_SAFE_INTEGER
    max_items: int = 100
    creatable: bool = True
    default: Callable[[], Any] | None = None


IS_ACTIVE_RULE = FieldRule("isActive", FieldKind.BOOLEAN, creatable=False)


@dataclass(frozen=True)
class EntitySchema:
    """Field table plus naming for one record kind."""
    kind: EntityKind
    path: str
    label: str
    plural_label: str
    snapshot_name: str
    fields: tuple[FieldRule, ...]
    alternate_key: str | None = None
    alternate_key_path: str | None = None

    @property
    def required_fields(self) -> list[str]:
        return [f.name for f in self.fields if f.required]

    @property
    def reference_fields(self) -> list[str]:
        return [f.name for f in self.fields if f.kind is FieldKind.REFERENCE]

    @property
    def creatable_fields(self) -> list[str]:
        return [f.name for f in self.fields if f.creatable]

    @property
    def update_rules(self) -> tuple[FieldRule, ...]:
        return self.fields + (IS_ACTIVE_RULE,)

    @property
    def updatable_fields(self) -> list[str]:
        return [f.name for f in self.update_rules]


def _check_rule(payload: dict, rule: FieldRule) -> None:
    if rule.kind is FieldKind.NUMBER:
        require_numeric_range(payload, rule.name, rule.minimum, rule.maximum)
    elif rule.kind is FieldKind.ENUM:
        require_enum(payload, rule.name, rule.choices)
    elif rule.kind is FieldKind.LIST:
        require_array_bound(payload, rule.name, rule.max_items)
    elif rule.kind is FieldKind.DATE:
        require_parseable_date(payload, rule.name)
    elif rule.kind is FieldKind.BOOLEAN:
        require_boolean(payload, rule.name)


def _require_object(payload: Any) -> dict:
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def validate_create(schema: EntitySchema, payload: Any) -> dict:
    """Run the create chain: required → references → per-field rules."""
    payload = _require_object(payload)
    require_fields(payload, schema.required_fields)
    require_identifier_shape(payload, schema.reference_fields)
    for rule in schema.fields:
        if rule.creatable:
            _check_rule(payload, rule)
    return payload


def validate_update(schema: EntitySchema, payload: Any) -> dict:
    """Run the update chain: references → per-field rules (nothing required)."""
    payload = _require_object(payload)
    require_identifier_shape(payload, schema.reference_fields)
    for rule in schema.update_rules:
        _check_rule(payload, rule)
    return payload
