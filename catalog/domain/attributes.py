"""Typed attribute values shared by entity types and entities."""
from __future__ import annotations

import json
import math
from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterable, List

from catalog.domain.errors import ValidationError


class AttributeType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    JSON = "json"


def is_empty_value(value: Any) -> bool:
    """A value counts as absent when it is None or an empty string."""
    return value is None or value == ""


def _coerce_number(name: str, raw: Any) -> int | float:
    if isinstance(raw, bool):
        raise ValidationError(f"Attribute '{name}' expects a number, got a boolean")
    if isinstance(raw, (int, float)):
        if isinstance(raw, float) and not math.isfinite(raw):
            raise ValidationError(f"Attribute '{name}' expects a finite number")
        return raw
    if isinstance(raw, str):
        text = raw.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            raise ValidationError(f"Attribute '{name}' expects a number, got {raw!r}") from None
        if not math.isfinite(number):
            raise ValidationError(f"Attribute '{name}' expects a finite number")
        return number
    raise ValidationError(f"Attribute '{name}' expects a number, got {type(raw).__name__}")


def _coerce_boolean(name: str, raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str) and raw.strip().lower() in ("true", "false"):
        return raw.strip().lower() == "true"
    raise ValidationError(f"Attribute '{name}' expects a boolean, got {raw!r}")


def _coerce_date(name: str, raw: Any) -> date | datetime:
    if isinstance(raw, (date, datetime)):
        return raw
    if isinstance(raw, str):
        text = raw.strip()
        try:
            if len(text) == 10:
                return date.fromisoformat(text)
            return datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            raise ValidationError(f"Attribute '{name}' expects an ISO-8601 date, got {raw!r}") from None
    raise ValidationError(f"Attribute '{name}' expects an ISO-8601 date, got {type(raw).__name__}")


def _coerce_json(name: str, raw: Any) -> Any:
    if isinstance(raw, str):
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Attribute '{name}' holds malformed JSON: {e.msg}") from None
    try:
        json.dumps(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"Attribute '{name}' is not a JSON document") from None
    return raw


def coerce_value(attr_type: AttributeType, raw: Any, name: str = "value") -> Any:
    """
    Validate a raw value against the declared attribute type.

    Args:
        attr_type: Declared attribute type
        raw: Value as received at the boundary
        name: Attribute name used in error messages

    Returns:
        The typed value, or None when the raw value is empty

    Raises:
        ValidationError: If the value does not fit the declared type
    """
    if is_empty_value(raw):
        return None
    if attr_type is AttributeType.STRING:
        if not isinstance(raw, str):
            raise ValidationError(f"Attribute '{name}' expects a string, got {type(raw).__name__}")
        return raw
    if attr_type is AttributeType.NUMBER:
        return _coerce_number(name, raw)
    if attr_type is AttributeType.BOOLEAN:
        return _coerce_boolean(name, raw)
    if attr_type is AttributeType.DATE:
        return _coerce_date(name, raw)
    return _coerce_json(name, raw)


def _encode(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


@dataclass(frozen=True)
class Attribute:
    """A named, typed field; schema-defined or added by the user."""

    name: str
    type: AttributeType = AttributeType.STRING
    required: bool = False
    is_user_defined: bool = False
    not_applicable: bool = False
    default_value: Any = None
    value: Any = None

    @classmethod
    def build(
        cls,
        name: str,
        type: AttributeType | str = AttributeType.STRING,
        required: bool = False,
        is_user_defined: bool = False,
        not_applicable: bool = False,
        default_value: Any = None,
        value: Any = None,
    ) -> Attribute:
        """Create a normalized attribute; values are checked against ``type``."""
        if not name or not name.strip():
            raise ValidationError("Attribute name is required and cannot be empty")
        try:
            attr_type = AttributeType(type)
        except ValueError:
            raise ValidationError(f"Unknown attribute type for '{name}': {type!r}") from None

        typed_value = coerce_value(attr_type, value, name)
        # A not-applicable attribute never keeps a value
        if not_applicable:
            typed_value = None

        return cls(
            name=name.strip(),
            type=attr_type,
            required=required,
            is_user_defined=is_user_defined,
            not_applicable=not_applicable,
            default_value=coerce_value(attr_type, default_value, name),
            value=typed_value,
        )

    @property
    def is_missing(self) -> bool:
        return self.required and not self.not_applicable and is_empty_value(self.value)

    def definition(self) -> Attribute:
        """The schema part of this attribute, without an instance value."""
        return replace(self, value=None, not_applicable=False)

    def to_document(self) -> Dict[str, Any]:
        """JSON-storable form."""
        return {
            "name": self.name,
            "type": self.type.value,
            "required": self.required,
            "is_user_defined": self.is_user_defined,
            "not_applicable": self.not_applicable,
            "default_value": _encode(self.default_value),
            "value": _encode(self.value),
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> Attribute:
        """Rebuild from stored form; only dates need decoding."""
        attr_type = AttributeType(doc.get("type", AttributeType.STRING.value))
        decode = _decode_date if attr_type is AttributeType.DATE else (lambda v: v)
        return cls(
            name=doc["name"],
            type=attr_type,
            required=doc.get("required", False),
            is_user_defined=doc.get("is_user_defined", False),
            not_applicable=doc.get("not_applicable", False),
            default_value=decode(doc.get("default_value")),
            value=decode(doc.get("value")),
        )


def _decode_date(value: Any) -> Any:
    if is_empty_value(value):
        return None
    return _coerce_date("value", value)


def ensure_unique_names(attributes: Iterable[Attribute]) -> None:
    """Raise ValidationError if two attributes share a name."""
    seen = set()
    for attr in attributes:
        if attr.name in seen:
            raise ValidationError(f"Duplicate attribute name: {attr.name}")
        seen.add(attr.name)


def missing_required_attributes(attributes: Iterable[Attribute]) -> List[str]:
    """Names of required, applicable attributes that carry no value."""
    return [attr.name for attr in attributes if attr.is_missing]
