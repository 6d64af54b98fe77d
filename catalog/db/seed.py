"""Entity types available out of the box."""
from __future__ import annotations

from typing import List

from catalog.domain.attributes import Attribute
from catalog.domain.entities import EntityTypeRecord


def _attrs(*specs: tuple) -> List[Attribute]:
    return [Attribute.build(name, type=attr_type, required=required) for name, attr_type, required in specs]


DEFAULT_ENTITY_TYPES: List[EntityTypeRecord] = [
    EntityTypeRecord(
        id="car",
        name="Car",
        description="Details about a car",
        predefined_attributes=_attrs(
            ("make", "string", True),
            ("model", "string", True),
            ("year", "number", True),
            ("color", "string", False),
            ("vin", "string", True),
            ("mileage", "number", False),
            ("transmission", "string", False),
        ),
    ),
    EntityTypeRecord(
        id="property",
        name="Property",
        description="Details about a property (house, apartment, etc.)",
        predefined_attributes=_attrs(
            ("type", "string", True),
            ("address", "string", True),
            ("bedrooms", "number", True),
            ("bathrooms", "number", True),
            ("squareFootage", "number", False),
            ("yearBuilt", "number", False),
            ("lotSize", "number", False),
            ("hasGarage", "boolean", False),
        ),
    ),
    EntityTypeRecord(
        id="book",
        name="Book",
        description="Details about a book",
        predefined_attributes=_attrs(
            ("title", "string", True),
            ("author", "string", True),
            ("isbn", "string", False),
            ("publicationYear", "number", False),
            ("genre", "string", False),
        ),
    ),
    EntityTypeRecord(
        id="software",
        name="Software",
        description="Details about a software application",
        predefined_attributes=_attrs(
            ("name", "string", True),
            ("version", "string", False),
            ("developer", "string", False),
            ("licenseType", "string", False),
            ("platform", "string", False),
        ),
    ),
]
