"""
Optional Sentry error reporting for the standings command line.

Reporting is off unless a DSN is configured. Recognised environment
variables:

- ``SENTRY_DSN`` or ``STANDINGS_SENTRY_DSN``: DSN URL.
- ``SENTRY_ENV``, ``SENTRY_ENVIRONMENT`` or ``ENV``: environment name
  (``development`` when unset).
- ``SENTRY_TRACES_SAMPLE_RATE`` / ``SENTRY_PROFILES_SAMPLE_RATE``: floats,
  clamped into [0, 1].
- ``SENTRY_DEBUG``: ``1``/``true``/``yes``/``on`` turns on SDK debug output.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

DEFAULT_DSN_ENVS = ("SENTRY_DSN", "STANDINGS_SENTRY_DSN")
ENVIRONMENT_ENVS = ("SENTRY_ENV", "SENTRY_ENVIRONMENT", "ENV")
DEFAULT_ENVIRONMENT = "development"


def _parse_float_env(name: str, default: float) -> float:
    """Sample rate from ``name``, clamped into [0, 1].

    Unset, empty or non-numeric values give ``default``.
    """
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.debug("Ignoring non-numeric %s=%r", name, raw)
        return default
    return min(1.0, max(0.0, value))


def _first_env(names: Iterable[str]) -> Optional[str]:
    return next((os.environ[n] for n in names if os.getenv(n)), None)


def _clean_dsn(raw: str) -> Optional[str]:
    """Strip whitespace and quotes; ``None`` unless an http(s) URL with a host."""
    dsn = raw.strip().strip("\"'")
    parsed = urlparse(dsn)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    return dsn


@dataclass(frozen=True)
class SentrySettings:
    dsn: str
    environment: str
    traces_sample_rate: float
    profiles_sample_rate: float
    debug: bool

    @classmethod
    def from_env(
        cls, dsn_envs: Iterable[str] = DEFAULT_DSN_ENVS
    ) -> Optional["SentrySettings"]:
        """Read settings from the environment; ``None`` when disabled."""
        dsn_envs = tuple(dsn_envs)
        raw = _first_env(dsn_envs)
        if raw is None:
            logger.info("Sentry disabled: none of %s is set", ", ".join(dsn_envs))
            return None
        dsn = _clean_dsn(raw)
        if dsn is None:
            logger.info("Sentry disabled: configured DSN is not a valid URL")
            return None
        return cls(
            dsn=dsn,
            environment=_first_env(ENVIRONMENT_ENVS) or DEFAULT_ENVIRONMENT,
            traces_sample_rate=_parse_float_env("SENTRY_TRACES_SAMPLE_RATE", 0.0),
            profiles_sample_rate=_parse_float_env(
                "SENTRY_PROFILES_SAMPLE_RATE", 0.0
            ),
            debug=os.getenv("SENTRY_DEBUG", "").lower()
            in {"1", "true", "yes", "on"},
        )


def init_sentry(
    *,
    context: str,
    release: Optional[str] = None,
    dsn_envs: Optional[Iterable[str]] = None,
    extra_integrations: Optional[Sequence[Any]] = None,
) -> bool:
    """Start Sentry when configured and report whether it started.

    ERROR records from the ``logging`` module become Sentry events and the
    ``service`` tag is set to ``context``. Never raises.
    """
    settings = SentrySettings.from_env(
        dsn_envs if dsn_envs is not None else DEFAULT_DSN_ENVS
    )
    if settings is None:
        return False

    import sentry_sdk
    from sentry_sdk.integrations.logging import LoggingIntegration

    integrations = [
        LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
        *(extra_integrations or ()),
    ]
    try:
        sentry_sdk.init(
            dsn=settings.dsn,
            environment=settings.environment,
            release=release,
            integrations=integrations,
            traces_sample_rate=settings.traces_sample_rate,
            profiles_sample_rate=settings.profiles_sample_rate,
            debug=settings.debug,
        )
    except Exception as e:  # pragma: no cover - SDK-specific failures
        logger.warning("Sentry init failed: %s", e)
        return False

    sentry_sdk.set_tag("service", context)
    logger.info(
        "Sentry enabled for %s (env=%s, traces=%s)",
        context,
        settings.environment,
        settings.traces_sample_rate,
    )
    return True


__all__ = ["SentrySettings", "init_sentry"]
