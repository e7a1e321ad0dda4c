"""Override validation: constraint dispatch and rule helpers.

Validators are looked up by constraint signature, the set of constraint
keys passed to a call. Each signature maps to exactly one routine:

    validators = ValidatorRegistry()

    @validators.register()
    def positive(record, raw_input, constraints):
        return validate_number(record, "qty", greater_than=0)

    @validators.register("max_qty")
    def within_stock(record, raw_input, constraints):
        return [
            *validate_number(record, "qty", greater_than=0),
            *validate_number(record, "qty", less_than_or_equal_to=constraints["max_qty"]),
        ]

Constraints are handed to the routine on every call and never stored.
"""

import re
from collections.abc import Callable, Collection, Iterable, Iterator, Mapping
from typing import Any

from typedform.errors import SchemaDefinitionError
from typedform.models import FieldError
from typedform.schema import Record

Validator = Callable[[Record, Mapping[str, Any], Mapping[str, Any]], Iterable[FieldError]]
ConstraintsInput = Mapping[str, Any] | Iterable[tuple[str, Any]] | None


def normalize_constraints(constraints: ConstraintsInput) -> dict[str, Any]:
    """Turn a mapping or a sequence of ``(key, value)`` pairs into a dict.

    Raises:
        TypeError: If a key is not a string
        ValueError: If a key is given twice
    """
    if not constraints:
        return {}

    items = constraints.items() if isinstance(constraints, Mapping) else constraints
    result: dict[str, Any] = {}
    for key, value in items:
        if not isinstance(key, str):
            raise TypeError(f"Constraint keys must be strings, got {key!r}")
        if key in result:
            raise ValueError(f"Duplicate constraint {key!r}")
        result[key] = value
    return result


def signature_of(constraints: Mapping[str, Any]) -> frozenset[str]:
    return frozenset(constraints)


class ValidatorRegistry:
    """Dispatch table from constraint signature to validation routine."""

    def __init__(self, default: Validator | None = None) -> None:
        self._routines: dict[frozenset[str], Validator] = {}
        if default is not None:
            self.add((), default)

    def add(self, keys: Iterable[str], routine: Validator) -> None:
        """Register a routine for the exact set of constraint keys.

        Raises:
            SchemaDefinitionError: If the signature already has a routine
        """
        signature = frozenset(keys)
        if signature in self._routines:
            raise SchemaDefinitionError(
                f"Validator already registered for constraints: {sorted(signature)}"
            )
        self._routines[signature] = routine

    def register(self, *keys: str) -> Callable[[Validator], Validator]:
        """Decorator form of add(). No keys registers the default routine."""

        def decorator(routine: Validator) -> Validator:
            self.add(keys, routine)
            return routine

        return decorator

    def lookup(self, signature: frozenset[str]) -> Validator | None:
        return self._routines.get(signature)

    def signatures(self) -> list[frozenset[str]]:
        return list(self._routines)

    def __contains__(self, signature: object) -> bool:
        return signature in self._routines

    def __iter__(self) -> Iterator[frozenset[str]]:
        return iter(self._routines)

    def __len__(self) -> int:
        return len(self._routines)


# Comparison checks for validate_number: (option, test, message template)
NUMBER_CHECKS: tuple[tuple[str, Callable[[Any, Any], bool], str], ...] = (
    ("less_than", lambda value, bound: value < bound, "must be less than {bound}"),
    (
        "greater_than",
        lambda value, bound: value > bound,
        "must be greater than {bound}",
    ),
    (
        "less_than_or_equal_to",
        lambda value, bound: value <= bound,
        "must be less than or equal to {bound}",
    ),
    (
        "greater_than_or_equal_to",
        lambda value, bound: value >= bound,
        "must be greater than or equal to {bound}",
    ),
    ("equal_to", lambda value, bound: value == bound, "must be equal to {bound}"),
    ("not_equal_to", lambda value, bound: value != bound, "must be not equal to {bound}"),
)


def validate_number(
    record: Record,
    field: str,
    *,
    message: str | None = None,
    **bounds: Any,
) -> list[FieldError]:
    """Check a numeric field against comparison bounds.

    Accepted bounds: less_than, greater_than, less_than_or_equal_to,
    greater_than_or_equal_to, equal_to, not_equal_to. At most one error is
    reported, for the first failing bound.
    """
    known = {name for name, _, _ in NUMBER_CHECKS}
    unknown = set(bounds) - known
    if unknown:
        raise TypeError(f"Unknown number bounds: {sorted(unknown)}")

    value = record[field]
    if value is None:
        return []

    for name, check, template in NUMBER_CHECKS:
        if name in bounds and not check(value, bounds[name]):
            return [
                FieldError.invalid(
                    field,
                    message or template.format(bound=bounds[name]),
                    validation="number",
                    **{name: bounds[name]},
                )
            ]
    return []


def validate_length(
    record: Record,
    field: str,
    *,
    min: int | None = None,
    max: int | None = None,
    exact: int | None = None,
    message: str | None = None,
) -> list[FieldError]:
    """Check the character length of a string field."""
    value = record[field]
    if value is None:
        return []

    length = len(value)
    if exact is not None and length != exact:
        default = f"should be {exact} character(s)"
        return [FieldError.invalid(field, message or default, validation="length", exact=exact)]
    if min is not None and length < min:
        default = f"should be at least {min} character(s)"
        return [FieldError.invalid(field, message or default, validation="length", min=min)]
    if max is not None and length > max:
        default = f"should be at most {max} character(s)"
        return [FieldError.invalid(field, message or default, validation="length", max=max)]
    return []


def validate_inclusion(
    record: Record,
    field: str,
    allowed: Collection[Any],
    *,
    message: str = "is invalid",
) -> list[FieldError]:
    """Check that a field's value is one of ``allowed``."""
    value = record[field]
    if value is None or value in allowed:
        return []
    return [FieldError.invalid(field, message, validation="inclusion", allowed=list(allowed))]


def validate_exclusion(
    record: Record,
    field: str,
    reserved: Collection[Any],
    *,
    message: str = "is reserved",
) -> list[FieldError]:
    """Check that a field's value is not one of ``reserved``."""
    value = record[field]
    if value is None or value not in reserved:
        return []
    return [FieldError.invalid(field, message, validation="exclusion")]


def validate_format(
    record: Record,
    field: str,
    pattern: str | re.Pattern[str],
    *,
    message: str = "has invalid format",
) -> list[FieldError]:
    """Check a string field against a regular expression (search semantics)."""
    value = record[field]
    if value is None:
        return []

    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
    if compiled.search(value):
        return []
    return [
        FieldError.invalid(field, message, validation="format", pattern=compiled.pattern)
    ]
