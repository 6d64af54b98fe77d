"""Marketplace filtering over a loaded set of entities."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from catalog.domain.attributes import AttributeType, is_empty_value
from catalog.domain.entities import EntityRecord
from catalog.domain.specifications import (
    AttributeValueContains,
    AttributeValueIn,
    EntityOfType,
    Specification,
    all_of,
    filter_by_specification,
    stringify_value,
)

FilterValue = Union[str, Sequence[str], None]

MULTI_SELECT_MAX_VALUES = 9

WIDGET_TRI_STATE = "tri_state"
WIDGET_MULTI_SELECT = "multi_select"
WIDGET_FREE_TEXT = "free_text"


@dataclass
class AttributeDomain:
    """Distinct non-empty values seen for one attribute name."""
    name: str
    type: AttributeType
    values: List[Any] = field(default_factory=list)

    @property
    def widget(self) -> str:
        if self.type is AttributeType.BOOLEAN:
            return WIDGET_TRI_STATE
        if 1 <= len(self.values) <= MULTI_SELECT_MAX_VALUES:
            return WIDGET_MULTI_SELECT
        return WIDGET_FREE_TEXT


def _value_key(value: Any) -> str:
    # Values that render the same are one option (2020 and 2020.0)
    return stringify_value(value)


def _is_active(value: FilterValue) -> bool:
    if value is None or value == "":
        return False
    if not isinstance(value, str) and len(value) == 0:
        return False
    return True


class FilterEngine:
    """Pure, order-preserving filtering; nothing is cached between calls."""

    def candidates(self, entities: Sequence[EntityRecord], type_id: Optional[str] = None) -> List[EntityRecord]:
        """All entities, or only those of the selected type."""
        if not type_id:
            return list(entities)
        return filter_by_specification(list(entities), EntityOfType(type_id))

    def attribute_domains(
        self, entities: Sequence[EntityRecord], type_id: Optional[str] = None
    ) -> Dict[str, AttributeDomain]:
        """
        Collect the filter widget domain of every attribute name on the candidates.

        Values keep first-seen order. An attribute whose values are all empty
        still gets an (empty) domain.
        """
        domains: Dict[str, AttributeDomain] = {}
        seen: Dict[str, set] = {}
        for entity in self.candidates(entities, type_id):
            for attr in entity.attributes:
                domain = domains.get(attr.name)
                if domain is None:
                    domain = domains[attr.name] = AttributeDomain(name=attr.name, type=attr.type)
                    seen[attr.name] = set()
                if is_empty_value(attr.value):
                    continue
                key = _value_key(attr.value)
                if key not in seen[attr.name]:
                    seen[attr.name].add(key)
                    domain.values.append(attr.value)
        return domains

    def build_specification(
        self, filters: Mapping[str, FilterValue], type_id: Optional[str] = None
    ) -> Specification:
        """Turn the active filters into one AND-combined specification."""
        specs: List[Specification] = []
        if type_id:
            specs.append(EntityOfType(type_id))
        for name, value in filters.items():
            if not _is_active(value):
                continue
            if isinstance(value, str):
                specs.append(AttributeValueContains(name, value))
            else:
                specs.append(AttributeValueIn(name, list(value)))
        return all_of(specs)

    def apply(
        self,
        entities: Sequence[EntityRecord],
        filters: Mapping[str, FilterValue],
        type_id: Optional[str] = None,
    ) -> List[EntityRecord]:
        """Entities passing the type filter and every active attribute filter."""
        return filter_by_specification(list(entities), self.build_specification(filters, type_id))
