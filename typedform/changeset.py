"""Changeset engine: cast raw input against a schema and validate it.

The engine holds no per-call state. Applying the same record, raw input
and constraints always yields an equal ChangesetResult.
"""

from collections.abc import Mapping
from typing import Any

from typedform.casting import cast_value
from typedform.config.models.forms import FormsConfig
from typedform.enums import ErrorKind
from typedform.errors import TypedFormError, UnrecognizedConstraintError
from typedform.models import ChangesetResult, FieldError
from typedform.observability.logging import get_logger
from typedform.observability.metrics import record_changeset
from typedform.schema import Record, Schema
from typedform.validation import (
    ConstraintsInput,
    Validator,
    ValidatorRegistry,
    normalize_constraints,
    signature_of,
)

logger = get_logger(__name__)


class ChangesetEngine:
    """Applies raw input to records of one schema.

    Pipeline per call:
    1. Cast every submitted field with its type's casting rule
    2. Reject required fields that ended up empty
    3. Run the override validator selected by constraint signature
    4. Tag the result ok or error
    """

    def __init__(
        self,
        schema: Schema,
        validators: ValidatorRegistry | None = None,
        config: FormsConfig | None = None,
        record_metrics: bool = True,
    ) -> None:
        self._schema = schema
        self._validators = validators if validators is not None else ValidatorRegistry()
        self._config = config or FormsConfig()
        self._record_metrics = record_metrics

    @property
    def schema(self) -> Schema:
        return self._schema

    @property
    def validators(self) -> ValidatorRegistry:
        return self._validators

    def apply(
        self,
        existing: Record,
        raw_input: Mapping[str, Any] | None = None,
        constraints: ConstraintsInput = (),
    ) -> ChangesetResult:
        """Apply raw input and constraints to an existing record.

        Args:
            existing: Record the changes are applied to
            raw_input: Field name to untyped value; missing keys leave fields unchanged
            constraints: Call-scoped validation parameters

        Returns:
            ChangesetResult tagged ok or error

        Raises:
            UnrecognizedConstraintError: If strict_constraints is on and no
                validator is registered for the constraint signature
        """
        if existing.schema_name != self._schema.name:
            raise TypedFormError(
                f"Record of schema {existing.schema_name!r} applied to "
                f"schema {self._schema.name!r}"
            )

        raw = dict(raw_input or {})
        constraint_map = normalize_constraints(constraints)
        routine = self._resolve_validator(constraint_map)

        unknown = sorted(key for key in raw if key not in self._schema)
        if unknown:
            logger.debug(
                "unknown_input_keys_ignored",
                schema=self._schema.name,
                keys=unknown,
            )

        changes, errors = self._cast(existing, raw)
        cast_failed = set(errors)
        candidate = existing.merge(changes)

        for spec in self._schema.fields():
            if spec.required and spec.name not in cast_failed and candidate[spec.name] is None:
                errors.setdefault(spec.name, []).append(
                    FieldError.invalid(spec.name, "can't be blank", validation="required")
                )

        if routine is not None:
            for error in self._run_validator(routine, candidate, raw, constraint_map):
                if error.field not in cast_failed:
                    errors.setdefault(error.field, []).append(error)

        submitted = {name: value for name, value in raw.items() if name in self._schema}
        ordered = tuple(
            error
            for name in self._schema.field_names()
            for error in errors.get(name, ())
        )

        if ordered:
            result = ChangesetResult.error(existing, changes, ordered, submitted)
            logger.info(
                "changeset_rejected",
                schema=self._schema.name,
                error_fields=[name for name in self._schema.field_names() if name in errors],
                error_count=len(ordered),
            )
        else:
            result = ChangesetResult.ok(existing, changes, submitted)
            logger.debug(
                "changeset_applied",
                schema=self._schema.name,
                changed_fields=list(changes),
                constraints=sorted(constraint_map),
            )

        if self._record_metrics:
            record_changeset(result)
        return result

    def _cast(
        self,
        existing: Record,
        raw: dict[str, Any],
    ) -> tuple[dict[str, Any], dict[str, list[FieldError]]]:
        """Cast submitted values; failed fields keep their existing value."""
        changes: dict[str, Any] = {}
        errors: dict[str, list[FieldError]] = {}

        for spec in self._schema.fields():
            if spec.name not in raw:
                continue

            value = raw[spec.name]
            try:
                cast = cast_value(
                    spec.type,
                    value,
                    empty_values=self._config.empty_values,
                    trim_strings=self._config.trim_strings,
                )
            except ValueError:
                errors[spec.name] = [FieldError.cast(spec.name, spec.type, value)]
                continue

            if cast != existing[spec.name] or type(cast) is not type(existing[spec.name]):
                changes[spec.name] = cast

        return changes, errors

    def _resolve_validator(self, constraints: dict[str, Any]) -> Validator | None:
        signature = signature_of(constraints)
        routine = self._validators.lookup(signature)
        if routine is not None or not signature:
            return routine

        if self._config.strict_constraints:
            raise UnrecognizedConstraintError(self._schema.name, signature)

        logger.warning(
            "unrecognized_constraints",
            schema=self._schema.name,
            constraints=sorted(signature),
            registered=[sorted(s) for s in self._validators.signatures()],
        )
        return self._validators.lookup(frozenset())

    def _run_validator(
        self,
        routine: Validator,
        candidate: Record,
        raw: dict[str, Any],
        constraints: dict[str, Any],
    ) -> list[FieldError]:
        reported = list(routine(candidate, raw, constraints))
        for error in reported:
            if error.field not in self._schema:
                raise TypedFormError(
                    f"Validator reported an error for undeclared field {error.field!r} "
                    f"on schema {self._schema.name!r}"
                )
            if error.kind != ErrorKind.VALIDATION:
                raise TypedFormError(
                    f"Validator reported a {error.kind.value} error for {error.field!r}; "
                    "validators may only report validation errors"
                )
        return reported
