"""Result models for the changeset engine.

Contains FieldError and the tagged ChangesetResult.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from typedform.casting import cast_error_message
from typedform.enums import ChangesetStatus, ErrorKind, FieldType
from typedform.errors import InvalidChangesetError
from typedform.schema import Record


class FieldError(BaseModel):
    """A single error attributed to exactly one field."""

    model_config = ConfigDict(frozen=True)

    field: str = Field(..., description="Name of the offending field")
    kind: ErrorKind = Field(..., description="Cast or validation failure")
    message: str = Field(..., min_length=1, description="Human-readable message")
    validation: str | None = Field(
        default=None,
        description="Rule that failed, e.g. 'number', 'required', 'inclusion'",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Rule parameters, e.g. {'greater_than': 0}",
    )

    @classmethod
    def cast(cls, field: str, field_type: FieldType, value: Any) -> "FieldError":
        """Error for a raw value that could not be cast."""
        return cls(
            field=field,
            kind=ErrorKind.CAST,
            message=cast_error_message(field_type, value),
            validation="cast",
            details={"type": field_type.value},
        )

    @classmethod
    def invalid(
        cls,
        field: str,
        message: str,
        validation: str | None = None,
        **details: Any,
    ) -> "FieldError":
        """Error for a value that cast but breaks a domain rule."""
        return cls(
            field=field,
            kind=ErrorKind.VALIDATION,
            message=message,
            validation=validation,
            details=details,
        )


class ChangesetResult(BaseModel):
    """Outcome of applying raw input to a record.

    ``data`` is the record the input was applied to and ``changes`` holds
    the values that cast successfully and differ from it. Only an ``ok``
    result is safe to persist.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    status: ChangesetStatus
    data: Record
    changes: dict[str, Any] = Field(default_factory=dict)
    errors: tuple[FieldError, ...] = ()
    raw_input: dict[str, Any] = Field(
        default_factory=dict,
        description="Submitted raw values for declared fields",
    )

    @classmethod
    def ok(
        cls,
        data: Record,
        changes: dict[str, Any],
        raw_input: dict[str, Any] | None = None,
    ) -> "ChangesetResult":
        return cls(
            status=ChangesetStatus.OK,
            data=data,
            changes=changes,
            raw_input=raw_input or {},
        )

    @classmethod
    def error(
        cls,
        data: Record,
        changes: dict[str, Any],
        errors: tuple[FieldError, ...],
        raw_input: dict[str, Any] | None = None,
    ) -> "ChangesetResult":
        if not errors:
            raise ValueError("A rejected changeset needs at least one field error")
        return cls(
            status=ChangesetStatus.ERROR,
            data=data,
            changes=changes,
            errors=errors,
            raw_input=raw_input or {},
        )

    @property
    def is_ok(self) -> bool:
        return self.status == ChangesetStatus.OK

    @property
    def record(self) -> Record:
        """Record to display.

        For ``ok`` this is ``data`` with every change applied. For ``error``
        only changes to fields without errors are applied; rejected fields
        keep their prior value.
        """
        if self.is_ok:
            return self.data.merge(self.changes)

        rejected = {error.field for error in self.errors}
        return self.data.merge(
            {name: value for name, value in self.changes.items() if name not in rejected}
        )

    def field_errors(self) -> dict[str, list[str]]:
        """Error messages grouped by field, in reporting order."""
        grouped: dict[str, list[str]] = {}
        for error in self.errors:
            grouped.setdefault(error.field, []).append(error.message)
        return grouped

    def unwrap(self) -> Record:
        """Return the validated record.

        Raises:
            InvalidChangesetError: If the changeset was rejected
        """
        if not self.is_ok:
            fields = ", ".join(self.field_errors())
            raise InvalidChangesetError(
                f"Changeset for {self.data.schema_name!r} rejected on: {fields}"
            )
        return self.record
