"""typedform: typed forms over a changeset casting and validation core.

Raw, string-keyed form input is cast against a declared schema, validated
with optional constraint-specific rules, and projected into a FormView that
a rendering layer can display without re-deriving validation.
"""

from typedform.changeset import ChangesetEngine
from typedform.enums import ChangesetStatus, ErrorKind, FieldType
from typedform.errors import (
    InvalidChangesetError,
    SchemaDefinitionError,
    TypedFormError,
    UnrecognizedConstraintError,
)
from typedform.form import FormField, FormProjection, FormView, project, typed_form
from typedform.models import ChangesetResult, FieldError
from typedform.schema import FieldSpec, Record, Schema, define_schema
from typedform.validation import (
    ValidatorRegistry,
    validate_exclusion,
    validate_format,
    validate_inclusion,
    validate_length,
    validate_number,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Enums
    "ChangesetStatus",
    "ErrorKind",
    "FieldType",
    # Errors
    "InvalidChangesetError",
    "SchemaDefinitionError",
    "TypedFormError",
    "UnrecognizedConstraintError",
    # Schema
    "FieldSpec",
    "Record",
    "Schema",
    "define_schema",
    # Changesets
    "ChangesetEngine",
    "ChangesetResult",
    "FieldError",
    # Validation
    "ValidatorRegistry",
    "validate_exclusion",
    "validate_format",
    "validate_inclusion",
    "validate_length",
    "validate_number",
    # Forms
    "FormField",
    "FormProjection",
    "FormView",
    "project",
    "typed_form",
]
