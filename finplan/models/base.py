"""
Shared model building blocks.

DESIGN DECISION: Python attributes are snake_case and double as storage
column names. Every field also carries a camelCase alias (generated from
the field name, or spelled out where the mechanical conversion would not
round-trip, e.g. `has_3a_beneficiary` <-> `has3aBeneficiary`).
Models accept both spellings on input.
"""

import types
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union, get_args, get_origin
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.fields import FieldInfo

from finplan.mapping import snake_to_camel


# Local backend: auto-increment integers. Hosted backend: UUIDs.
EntityId = Union[int, UUID]


def accepts_none(annotation: Any) -> bool:
    if annotation is None or annotation is type(None) or annotation is Any:
        return True
    if get_origin(annotation) in (Union, types.UnionType):
        return any(accepts_none(arg) for arg in get_args(annotation))
    return False


def null_means_default(field: FieldInfo) -> bool:
    """
    True for fields with a default that cannot hold None (`taxes_da: bool = False`).

    A NULL stored in such a column stands for "never set" and reads back
    as the model default.
    """
    return not field.is_required() and not accepts_none(field.annotation)


class Owner(str, Enum):
    """Whose asset, liability or income a row describes."""
    MAN = "man"
    WOMAN = "woman"
    JOINT = "joint"


class Person(str, Enum):
    """Owner for products that cannot be held jointly."""
    MAN = "man"
    WOMAN = "woman"


class PlanningModel(BaseModel):
    """Base for every persisted record."""

    model_config = ConfigDict(
        alias_generator=snake_to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class ClientOwnedRecord(PlanningModel):
    """
    A record owned by exactly one client.

    `id` and `created_at` are assigned by the backend.
    """

    id: Optional[EntityId] = Field(
        default=None,
        description="Row identifier (assigned by the backend)"
    )
    client_id: EntityId = Field(
        ...,
        description="Owning client"
    )
    created_at: Optional[datetime] = Field(
        default=None,
        description="Creation timestamp (assigned by the backend)"
    )
