"""Prometheus metrics for typedform.

Counts applied changesets and the field errors they report.
"""

from typing import TYPE_CHECKING

from prometheus_client import Counter

if TYPE_CHECKING:
    from typedform.models import ChangesetResult

CHANGESET_COUNT = Counter(
    "typedform_changeset_total",
    "Total number of changesets applied",
    labelnames=["schema", "status"],
)

FIELD_ERRORS = Counter(
    "typedform_field_errors_total",
    "Total number of field errors reported by changesets",
    labelnames=["schema", "field", "kind"],
)


def record_changeset(result: "ChangesetResult") -> None:
    """Record one applied changeset and its field errors."""
    schema = result.data.schema_name
    CHANGESET_COUNT.labels(schema=schema, status=result.status.value).inc()
    for error in result.errors:
        FIELD_ERRORS.labels(schema=schema, field=error.field, kind=error.kind.value).inc()
