"""Exception hierarchy for typedform.

Field-level problems (cast failures, rule violations) are never raised; they
are reported as FieldError values on a ChangesetResult. The exceptions below
signal programmer errors only.
"""


class TypedFormError(Exception):
    """Base exception for all typedform errors."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class SchemaDefinitionError(TypedFormError):
    """Raised when a schema is declared incorrectly.

    Examples:
        - Two fields share a name
        - A default names an undeclared field
        - A default is not valid for the field type
    """

    pass


class UnrecognizedConstraintError(TypedFormError):
    """Raised when no validator is registered for a constraint signature."""

    def __init__(self, schema: str, signature: frozenset[str]) -> None:
        keys = ", ".join(sorted(signature))
        super().__init__(
            f"No validator registered on schema {schema!r} for constraints: {keys}"
        )
        self.schema = schema
        self.signature = signature


class InvalidChangesetError(TypedFormError):
    """Raised when the record of a rejected changeset is requested."""

    pass
