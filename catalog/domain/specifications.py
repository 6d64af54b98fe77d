"""Specification pattern for reusable entity filters."""
from __future__ import annotations

import json
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any, Iterable, List, Sequence

from catalog.domain.entities import EntityRecord


class Specification(ABC):
    """Abstract base for specifications (query filters)."""

    @abstractmethod
    def is_satisfied_by(self, candidate: EntityRecord) -> bool:
        """Check if candidate satisfies this specification."""
        pass

    def and_(self, other: Specification) -> Specification:
        """Combine with AND logic."""
        return AndSpecification(self, other)

    def or_(self, other: Specification) -> Specification:
        """Combine with OR logic."""
        return OrSpecification(self, other)

    def not_(self) -> Specification:
        """Negate this specification."""
        return NotSpecification(self)


class AndSpecification(Specification):
    """AND composite specification."""

    def __init__(self, left: Specification, right: Specification):
        self.left = left
        self.right = right

    def is_satisfied_by(self, candidate: EntityRecord) -> bool:
        return self.left.is_satisfied_by(candidate) and self.right.is_satisfied_by(candidate)


class OrSpecification(Specification):
    """OR composite specification."""

    def __init__(self, left: Specification, right: Specification):
        self.left = left
        self.right = right

    def is_satisfied_by(self, candidate: EntityRecord) -> bool:
        return self.left.is_satisfied_by(candidate) or self.right.is_satisfied_by(candidate)


class NotSpecification(Specification):
    """NOT specification."""

    def __init__(self, spec: Specification):
        self.spec = spec

    def is_satisfied_by(self, candidate: EntityRecord) -> bool:
        return not self.spec.is_satisfied_by(candidate)


class AnyEntity(Specification):
    """Matches everything; the neutral element for AND chains."""

    def is_satisfied_by(self, candidate: EntityRecord) -> bool:
        return True


def stringify_value(value: Any) -> str:
    """Render an attribute value the way the marketplace compares it."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), sort_keys=True)
    return str(value)


# Entity Specifications

class EntityOfType(Specification):
    """Entities instantiating a given entity type."""

    def __init__(self, type_id: str):
        self.type_id = type_id

    def is_satisfied_by(self, entity: EntityRecord) -> bool:
        return entity.type_id == self.type_id


class AttributeValueIn(Specification):
    """Attribute value (stringified) is one of the selected values."""

    def __init__(self, name: str, values: Sequence[str]):
        self.name = name
        self.values = [str(v) for v in values]

    def is_satisfied_by(self, entity: EntityRecord) -> bool:
        attribute = entity.attribute(self.name)
        if attribute is None:
            return False
        return stringify_value(attribute.value) in self.values


class AttributeValueContains(Specification):
    """Attribute value contains the text (case-insensitive)."""

    def __init__(self, name: str, text: str):
        self.name = name
        self.text = text.lower()

    def is_satisfied_by(self, entity: EntityRecord) -> bool:
        attribute = entity.attribute(self.name)
        if attribute is None:
            return False
        return self.text in stringify_value(attribute.value).lower()


# Helper functions

def all_of(specs: Iterable[Specification]) -> Specification:
    """Chain specifications with AND logic."""
    combined: Specification = AnyEntity()
    for spec in specs:
        combined = combined.and_(spec)
    return combined


def filter_by_specification(items: List[EntityRecord], spec: Specification) -> List[EntityRecord]:
    """Filter a collection using a specification."""
    return [item for item in items if spec.is_satisfied_by(item)]
