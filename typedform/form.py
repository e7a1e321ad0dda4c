"""Form projection: turn changeset results into renderable form views.

A FormView is built fresh for every render and never updated in place.
Successful input is applied twice: once to cast and validate the pending
changes, and once more with no input so the view shows confirmed data
rather than pending changes.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from typedform.changeset import ChangesetEngine
from typedform.config.settings import Settings
from typedform.models import ChangesetResult
from typedform.observability.logging import get_logger
from typedform.schema import FieldDeclaration, Record, Schema, define_schema
from typedform.validation import ConstraintsInput, ValidatorRegistry

logger = get_logger(__name__)


class FormField(BaseModel):
    """One field of a rendered form."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: Any = Field(default=None, description="Value to display")
    errors: tuple[str, ...] = Field(default=(), description="Ordered error messages")
    input: Any = Field(default=None, description="Raw value submitted for this field")

    @property
    def valid(self) -> bool:
        return not self.errors


class FormView(BaseModel):
    """Renderable projection of a changeset result."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Schema name")
    fields: tuple[FormField, ...] = ()

    def __getitem__(self, name: str) -> FormField:
        for form_field in self.fields:
            if form_field.name == name:
                return form_field
        raise KeyError(name)

    @property
    def is_valid(self) -> bool:
        return all(form_field.valid for form_field in self.fields)

    def values(self) -> dict[str, Any]:
        return {form_field.name: form_field.value for form_field in self.fields}

    def errors(self) -> dict[str, list[str]]:
        """Messages for fields that have errors."""
        return {
            form_field.name: list(form_field.errors)
            for form_field in self.fields
            if form_field.errors
        }


def project(schema: Schema, result: ChangesetResult) -> FormView:
    """Build a FormView from a changeset result."""
    record = result.record
    messages = result.field_errors()
    return FormView(
        name=schema.name,
        fields=tuple(
            FormField(
                name=spec.name,
                value=record[spec.name],
                errors=tuple(messages.get(spec.name, ())),
                input=result.raw_input.get(spec.name),
            )
            for spec in schema.fields()
        ),
    )


class FormProjection:
    """new_form/update_form entry points for one schema."""

    def __init__(self, engine: ChangesetEngine) -> None:
        self._engine = engine

    @property
    def schema(self) -> Schema:
        return self._engine.schema

    @property
    def engine(self) -> ChangesetEngine:
        return self._engine

    def new_form(
        self,
        override_attrs: Mapping[str, Any] | None = None,
        constraints: ConstraintsInput = (),
    ) -> FormView:
        """Render a form from the schema defaults, overridden by ``override_attrs``."""
        attrs = {**self.schema.defaults(), **(override_attrs or {})}
        return self.update_form(attrs, constraints)

    def update_form(
        self,
        raw_input: Mapping[str, Any],
        constraints: ConstraintsInput = (),
    ) -> FormView:
        """Validate raw input against a blank record and render the outcome."""
        result = self._engine.apply(self.schema.blank_record(), raw_input, constraints)
        if not result.is_ok:
            return project(self.schema, result)

        confirmed = self._engine.apply(result.record, {}, constraints)
        if not confirmed.is_ok:
            logger.warning(
                "confirmed_record_rejected",
                schema=self.schema.name,
                error_fields=list(confirmed.field_errors()),
            )
        return project(self.schema, confirmed)

    def changeset(
        self,
        existing: Record,
        raw_input: Mapping[str, Any],
        constraints: ConstraintsInput = (),
    ) -> ChangesetResult:
        """Apply input to a stored record, e.g. before persisting it."""
        return self._engine.apply(existing, raw_input, constraints)


def typed_form(
    name: str,
    fields: Sequence[FieldDeclaration],
    *,
    defaults: Mapping[str, Any] | None = None,
    validators: ValidatorRegistry | None = None,
    settings: Settings | None = None,
) -> FormProjection:
    """Declare a typed form.

    Builds the schema, attaches the validator dispatch table and returns
    the form's projection. Call once at definition time:

        validators = ValidatorRegistry()

        @validators.register()
        def positive_qty(record, raw_input, constraints):
            return validate_number(record, "qty", greater_than=0)

        LineItemForm = typed_form(
            "line_item",
            [("qty", "integer", 1)],
            validators=validators,
        )

        view = LineItemForm.update_form({"qty": "3"})

    Raises:
        SchemaDefinitionError: If the schema or validators are declared incorrectly
    """
    schema = define_schema(name, fields, defaults)
    engine = ChangesetEngine(
        schema,
        validators=validators,
        config=settings.forms if settings else None,
        record_metrics=settings.observability.metrics.enabled if settings else True,
    )
    logger.debug(
        "typed_form_defined",
        schema=name,
        fields=list(schema.field_names()),
        constraint_signatures=[sorted(s) for s in engine.validators.signatures()],
    )
    return FormProjection(engine)
