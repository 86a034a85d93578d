"""
Field-name Mapper

Records travel in two naming conventions:
- camelCase at the edges (export documents, anything a view layer hands us)
- snake_case in storage (column names)

These helpers translate the top-level keys of a mapping between the two.
Values are passed through untouched; nested objects are NOT translated.

Per-entity, type-checked translation lives in
finplan.services.field_map.FieldMap, which builds on these functions.
"""

import re
from typing import Any, Mapping

_UPPER = re.compile(r"[A-Z]")
_UNDERSCORE_LOWER = re.compile(r"_([a-z])")


def camel_to_snake(name: str) -> str:
    """
    Convert a camelCase key to snake_case.

    Every uppercase letter becomes an underscore plus its lowercase form,
    so snake_case input comes back unchanged.

        >>> camel_to_snake("currentBalanceMan")
        'current_balance_man'
    """
    return _UPPER.sub(lambda m: "_" + m.group(0).lower(), name)


def snake_to_camel(name: str) -> str:
    """
    Convert a snake_case key to camelCase.

    Only an underscore followed by a lowercase letter is collapsed, so
    camelCase input comes back unchanged.

        >>> snake_to_camel("current_balance_man")
        'currentBalanceMan'
    """
    return _UNDERSCORE_LOWER.sub(lambda m: m.group(1).upper(), name)


def map_to_db(obj: Mapping[str, Any]) -> dict[str, Any]:
    """
    Translate a camelCase mapping into a snake_case row for writing.

    The `id` key is stripped: the backend assigns it on insert and it is
    addressed separately on update.
    """
    return {
        camel_to_snake(key): value
        for key, value in obj.items()
        if key != "id"
    }


def map_from_db(row: Mapping[str, Any]) -> dict[str, Any]:
    """Translate a snake_case row into a camelCase mapping."""
    return {snake_to_camel(key): value for key, value in row.items()}
