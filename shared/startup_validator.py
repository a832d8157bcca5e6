"""
Startup configuration validation module.

This module provides startup-time validation for critical configuration
to catch misconfigurations early (fail-fast) rather than at runtime when
a customer tries to pay for a meeting.

Usage:
    from shared.startup_validator import validate_startup_config, StartupValidationError

    async def main():
        try:
            await validate_startup_config()
        except StartupValidationError as e:
            logger.critical(f"Startup blocked: {e}")
            sys.exit(1)
"""

import logging
from urllib.parse import urlparse

from shared.config import get_settings

logger = logging.getLogger(__name__)


class StartupValidationError(Exception):
    """Raised when critical startup validation fails."""

    pass


def _is_http_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


async def validate_startup_config() -> dict[str, bool]:
    """
    Validate all critical configuration at startup.

    Performs tiered validation:
    - TIER 1 (CRITICAL): Block startup if any fail
    - TIER 2 (IMPORTANT): Warn but allow startup

    Returns:
        dict of {check_name: passed} for all validations

    Raises:
        StartupValidationError: If any CRITICAL check fails
    """
    settings = get_settings()
    results: dict[str, bool] = {}
    critical_failures: list[str] = []

    # =========================================================================
    # TIER 1: CRITICAL (block startup if any fail)
    # =========================================================================

    # 1. Stripe secret key (no payment can be taken without it)
    if settings.STRIPE_SECRET_KEY == "sk_test_placeholder":
        critical_failures.append(
            "STRIPE_SECRET_KEY is placeholder - set your Stripe secret key"
        )
        results["stripe_secret_key"] = False
    elif not settings.STRIPE_SECRET_KEY.startswith(("sk_", "rk_")):
        logger.warning(
            "STRIPE_SECRET_KEY doesn't start with 'sk_' or 'rk_' - verify it's correct"
        )
        results["stripe_secret_key"] = True  # Allow but warn
    else:
        results["stripe_secret_key"] = True
        logger.info("  [OK] Stripe secret key configured")

    # 2. Redirect base URL must be absolute for Stripe to accept it
    if not _is_http_url(settings.APP_BASE_URL):
        critical_failures.append(
            f"APP_BASE_URL must be an absolute http(s) URL, got {settings.APP_BASE_URL!r}"
        )
        results["app_base_url"] = False
    else:
        results["app_base_url"] = True

    # =========================================================================
    # TIER 2: IMPORTANT (warn but allow startup)
    # =========================================================================

    # 3. Nylas access token (cancellations will fail without it)
    if settings.NYLAS_ACCESS_TOKEN == "nylas-placeholder":
        logger.warning(
            "  [WARN] NYLAS_ACCESS_TOKEN is placeholder - booking cancellations will fail"
        )
        results["nylas_access_token"] = False
    else:
        results["nylas_access_token"] = True
        logger.info("  [OK] Nylas access token configured")

    # 4. Outbound service URLs
    for name in ("ACCEPT_SERVICE_URL", "NYLAS_API_URL", "SCHEDULER_BASE_URL"):
        value = getattr(settings, name)
        key = f"{name.lower()}_format"
        if not _is_http_url(value):
            logger.warning(f"  [WARN] {name} is not an absolute http(s) URL: {value!r}")
            results[key] = False
        else:
            results[key] = True

    # 5. Timeout sanity
    if settings.BOOKING_REQUEST_TIMEOUT <= 0:
        logger.warning("  [WARN] BOOKING_REQUEST_TIMEOUT must be positive")
        results["booking_request_timeout"] = False
    else:
        results["booking_request_timeout"] = True

    # =========================================================================
    # Summary and result
    # =========================================================================

    passed = sum(1 for v in results.values() if v)
    total = len(results)
    logger.info(f"Startup validation: {passed}/{total} checks passed")

    if critical_failures:
        logger.critical("=" * 60)
        logger.critical("STARTUP BLOCKED - Critical configuration errors:")
        for i, failure in enumerate(critical_failures, 1):
            logger.critical(f"  {i}. {failure}")
        logger.critical("=" * 60)
        raise StartupValidationError(
            f"Critical startup validation failed ({len(critical_failures)} errors): "
            f"{'; '.join(critical_failures)}"
        )

    return results
