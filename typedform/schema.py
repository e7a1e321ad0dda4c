"""Schema descriptor: typed fields, defaults and records.

A Schema is declared once, at form-definition time, and never mutated.
Records are immutable snapshots of field values for one schema.
"""

from collections.abc import Iterator, Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from typedform.casting import cast_value
from typedform.enums import FieldType
from typedform.errors import SchemaDefinitionError


class FieldSpec(BaseModel):
    """A named, typed slot in a schema."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(
        ...,
        pattern=r"^[A-Za-z_][A-Za-z0-9_]*$",
        description="Field identifier, unique within a schema",
    )
    type: FieldType = Field(..., description="Declared type")
    default: Any = Field(default=None, description="Value of the field on a blank record")
    required: bool = Field(default=False, description="Reject a missing value")


class Record(Mapping[str, Any]):
    """Immutable mapping of field name to typed value."""

    __slots__ = ("_schema_name", "_values")

    def __init__(self, schema_name: str, values: Mapping[str, Any]) -> None:
        self._schema_name = schema_name
        self._values = dict(values)

    @property
    def schema_name(self) -> str:
        return self._schema_name

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return self._schema_name == other._schema_name and self._values == other._values

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Record({self._schema_name!r}, {self._values!r})"

    def merge(self, changes: Mapping[str, Any]) -> "Record":
        """Return a new record with the given values applied."""
        if not changes:
            return self
        return Record(self._schema_name, {**self._values, **changes})


class Schema:
    """Ordered collection of FieldSpecs plus schema-level defaults.

    Two kinds of default exist. A FieldSpec default is the value a field
    holds on a blank record. The schema-level ``defaults`` mapping is the
    initial input of a new form and overrides FieldSpec defaults when both
    name the same field.
    """

    def __init__(
        self,
        name: str,
        fields: Sequence[FieldSpec],
        defaults: Mapping[str, Any] | None = None,
    ) -> None:
        self._name = name
        self._fields = tuple(fields)
        self._by_name: dict[str, FieldSpec] = {}

        for spec in self._fields:
            if spec.name in self._by_name:
                raise SchemaDefinitionError(
                    f"Duplicate field {spec.name!r} in schema {name!r}"
                )
            self._by_name[spec.name] = spec

        unknown = sorted(set(defaults or {}) - set(self._by_name))
        if unknown:
            raise SchemaDefinitionError(
                f"Defaults for undeclared fields in schema {name!r}: {', '.join(unknown)}"
            )
        self._defaults = dict(defaults or {})

        blank: dict[str, Any] = {}
        for spec in self._fields:
            try:
                blank[spec.name] = cast_value(spec.type, spec.default)
            except ValueError as e:
                raise SchemaDefinitionError(
                    f"Default {spec.default!r} of field {spec.name!r} "
                    f"is not a valid {spec.type.value}",
                    cause=e,
                ) from e
        self._blank = Record(name, blank)

    @property
    def name(self) -> str:
        return self._name

    def fields(self) -> tuple[FieldSpec, ...]:
        """Field specs in declaration order."""
        return self._fields

    def field(self, name: str) -> FieldSpec:
        """Look up a field spec by name.

        Raises:
            KeyError: If the schema declares no such field
        """
        return self._by_name[name]

    def field_names(self) -> tuple[str, ...]:
        return tuple(self._by_name)

    def defaults(self) -> dict[str, Any]:
        """Initial form input: FieldSpec defaults overlaid by schema defaults."""
        merged = {
            spec.name: spec.default for spec in self._fields if spec.default is not None
        }
        merged.update(self._defaults)
        return merged

    def blank_record(self) -> Record:
        """A record with every field at its FieldSpec default (or None)."""
        return self._blank

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __repr__(self) -> str:
        return f"Schema({self._name!r}, fields={list(self._by_name)!r})"


FieldDeclaration = FieldSpec | tuple[str, FieldType | str] | tuple[str, FieldType | str, Any]


def define_schema(
    name: str,
    fields: Sequence[FieldDeclaration],
    defaults: Mapping[str, Any] | None = None,
) -> Schema:
    """Build a schema from FieldSpecs or ``(name, type[, default])`` tuples.

    Example:
        schema = define_schema(
            "line_item",
            [("sku", "string"), ("qty", "integer", 1)],
        )

    Raises:
        SchemaDefinitionError: On duplicate names, unknown types or bad defaults
    """
    specs: list[FieldSpec] = []
    for declaration in fields:
        if isinstance(declaration, FieldSpec):
            specs.append(declaration)
            continue

        field_name, field_type, *rest = declaration
        try:
            specs.append(
                FieldSpec(
                    name=field_name,
                    type=FieldType(field_type),
                    default=rest[0] if rest else None,
                )
            )
        except ValueError as e:
            raise SchemaDefinitionError(
                f"Invalid declaration for field {field_name!r} in schema {name!r}: {e}",
                cause=e,
            ) from e

    return Schema(name, specs, defaults)
