"""Bootstrap helper for applications embedding typedform.

Loads configuration and configures logging in one call:

    from typedform.bootstrap import bootstrap
    from typedform import typed_form

    settings = bootstrap()
    OrderForm = typed_form("order", [("qty", "integer", 1)], settings=settings)
"""

from typedform.config import get_settings
from typedform.config.settings import Settings
from typedform.observability.logging import get_logger, setup_logging

logger = get_logger(__name__)


def bootstrap(settings: Settings | None = None) -> Settings:
    """Load settings (unless given) and configure structured logging.

    Returns:
        The settings the application should pass to typed_form()
    """
    settings = settings or get_settings()
    logging_config = settings.observability.logging

    setup_logging(
        level=logging_config.level,
        format=logging_config.format,
        redact_pii=logging_config.redact_pii,
    )
    logger.info(
        "typedform_bootstrapped",
        app_name=settings.app_name,
        log_level=logging_config.level,
        metrics_enabled=settings.observability.metrics.enabled,
        strict_constraints=settings.forms.strict_constraints,
    )
    return settings
