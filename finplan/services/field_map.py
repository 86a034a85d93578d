"""
Per-entity field mapping.

DESIGN DECISION: Translation between the caller's keys and storage columns
is driven by the model's declared fields, not by string manipulation alone.
Every accepted key (snake_case attribute or camelCase alias) is looked up
in a table built once per model, so a misspelled or mis-cased field is an
error instead of a silently dropped column. Values are validated against
the field's type and constraints before they reach the backend.
"""

from typing import Annotated, Any, Generic, Mapping, TypeVar, Union

from pydantic import BaseModel, ConfigDict, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from finplan.models.base import null_means_default
from finplan.services.storage.interface import Row, StorageError, ValidationError


T = TypeVar("T", bound=BaseModel)

_VALUE_CONFIG = ConfigDict(str_strip_whitespace=True)


def _first_error(error: PydanticValidationError) -> str:
    details = error.errors()
    if not details:
        return str(error)
    first = details[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first['msg']}" if location else first["msg"]


class FieldMap(Generic[T]):
    """
    Mapping table between one model and its storage columns.

    Usage:
        goals = FieldMap(Goal)
        goals.to_columns({"targetYear": 2030})   # {"target_year": 2030}
        goals.from_row(row)                      # Goal(...)
    """

    def __init__(self, model: type[T]):
        self.model = model
        self._columns: dict[str, str] = {}
        self._adapters: dict[str, TypeAdapter] = {}
        # NULL in these columns reads back as the model default
        self._defaulted = {
            name for name, field in model.model_fields.items() if null_means_default(field)
        }

        for name, field in model.model_fields.items():
            self._columns[name] = name
            if field.alias:
                self._columns[field.alias] = name

            if field.metadata:
                annotation = Annotated[(field.annotation, *field.metadata)]
            else:
                annotation = field.annotation
            self._adapters[name] = TypeAdapter(annotation, config=_VALUE_CONFIG)

    @property
    def columns(self) -> list[str]:
        return list(self._adapters)

    def column(self, key: str) -> str:
        """Column name for a field given by attribute name or alias."""
        try:
            return self._columns[key]
        except KeyError:
            raise ValidationError(
                f"{self.model.__name__} has no field '{key}'"
            ) from None

    def to_columns(self, fields: Mapping[str, Any]) -> Row:
        """
        Translate and validate a partial update.

        Only the given keys are returned; `id` is dropped.

        Raises:
            ValidationError: Unknown key or invalid value
        """
        columns: Row = {}
        for key, value in fields.items():
            if key == "id":
                continue
            column = self.column(key)
            if column == "id":
                continue

            adapter = self._adapters[column]
            try:
                validated = adapter.validate_python(value)
            except PydanticValidationError as e:
                raise ValidationError(
                    f"{self.model.__name__}.{column}: {_first_error(e)}"
                ) from e
            columns[column] = adapter.dump_python(validated, mode="json")

        return columns

    def coerce(self, item: Union[T, Mapping[str, Any]]) -> T:
        """Accept a model instance or a mapping with either key style."""
        if isinstance(item, self.model):
            return item
        try:
            return self.model.model_validate(dict(item))
        except PydanticValidationError as e:
            raise ValidationError(f"{self.model.__name__}: {_first_error(e)}") from e

    def to_row(self, record: T) -> Row:
        """Whole record as a row for insertion. None values and `id` are left out."""
        return record.model_dump(mode="json", exclude_none=True, exclude={"id"})

    def from_row(self, row: Mapping[str, Any]) -> T:
        """Typed record from a stored row. Missing values fall back to model defaults."""
        data = {
            column: value
            for column, value in row.items()
            if value is not None or column not in self._defaulted
        }
        try:
            return self.model.model_validate(data)
        except PydanticValidationError as e:
            raise StorageError(
                f"Stored {self.model.__name__} row is invalid: {_first_error(e)}"
            ) from e
