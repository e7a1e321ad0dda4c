"""Observability: structured logging and changeset metrics.

Uses structlog for logging and Prometheus for metrics.
"""
