"""Enums for the typed-form domain."""

from enum import Enum


class FieldType(str, Enum):
    """Declared type of a schema field.

    Each member has exactly one casting rule in typedform.casting.
    """

    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    STRING = "string"
    BOOLEAN = "boolean"
    DATE = "date"
    DATETIME = "datetime"


class ErrorKind(str, Enum):
    """Kind of a field-scoped error."""

    CAST = "cast"  # Raw value could not be converted to the field type
    VALIDATION = "validation"  # Value cast but broke a domain rule


class ChangesetStatus(str, Enum):
    """Tag of a ChangesetResult."""

    OK = "ok"
    ERROR = "error"
