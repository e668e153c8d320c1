# =============================================================================
# Sentry Error Tracking
# =============================================================================
#
# Enabled when SENTRY_DSN is set and the "sentry" extra is installed:
#   pip install "agribridge[sentry]"
#
# Request bodies sent to /localize, /translate and /announcements carry
# farmer and merchant records (names, phone numbers, prices); they are
# never forwarded.
#
# =============================================================================

import logging

from agribridge import __version__
from agribridge.config import Settings, get_settings

logger = logging.getLogger(__name__)

try:
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.logging import LoggingIntegration
    SENTRY_AVAILABLE = True
except ImportError:
    SENTRY_AVAILABLE = False
    sentry_sdk = None

# Transactions not worth tracing
QUIET_ROUTES = ("/health", "/locales")

SENSITIVE_HEADERS = ("authorization", "cookie", "x-api-key")


def init_sentry(settings: Settings | None = None) -> bool:
    """
    Start error tracking for the API process.

    Returns True if Sentry was initialized.
    """
    settings = settings or get_settings()

    if not settings.sentry_dsn:
        logger.info("SENTRY_DSN not set - error tracking disabled")
        return False
    if not SENTRY_AVAILABLE:
        logger.warning("SENTRY_DSN is set but sentry-sdk is not installed")
        return False

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        release=f"agribridge@{__version__}",
        traces_sample_rate=0.05 if settings.is_production else 1.0,
        integrations=[
            FastApiIntegration(transaction_style="url"),
            # Per-field translation failures are warnings, not events
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
        ],
        send_default_pii=False,
        max_request_body_size="never",
        before_send=_filter_events,
        before_send_transaction=_filter_transactions,
    )
    sentry_sdk.set_tag("llm_provider", settings.llm_provider)

    logger.info(f"Sentry enabled ({settings.environment}, provider={settings.llm_provider})")
    return True


def _filter_events(event: dict, hint: dict) -> dict | None:
    # 4xx responses are client mistakes (bad lang, unknown announcement)
    exc_info = hint.get("exc_info")
    if exc_info:
        from fastapi import HTTPException
        error = exc_info[1]
        if isinstance(error, HTTPException) and error.status_code < 500:
            return None

    request = event.get("request")
    if request:
        request.pop("data", None)
        headers = request.get("headers") or {}
        for key in headers:
            if key.lower() in SENSITIVE_HEADERS:
                headers[key] = "[Filtered]"

    return event


def _filter_transactions(event: dict, hint: dict) -> dict | None:
    if event.get("transaction") in QUIET_ROUTES:
        return None
    return event


def capture_exception(error: Exception, **context) -> str | None:
    """
    Report an unexpected error.

    A "locale" entry in context becomes a searchable tag; everything else is
    attached as extra data. Falls back to logging when Sentry is off.
    """
    if not SENTRY_AVAILABLE or not sentry_sdk.get_client().is_active():
        logger.exception(f"Unhandled error ({context.get('path', 'no path')})", exc_info=error)
        return None

    with sentry_sdk.new_scope() as scope:
        locale = context.pop("locale", None)
        if locale:
            scope.set_tag("locale", str(locale))
        for key, value in context.items():
            scope.set_extra(key, value)
        return sentry_sdk.capture_exception(error)
