"""Runtime settings read from the environment."""

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Mapping, Optional

from paylog.domain.errors import DomainError


class ConfigError(DomainError):
    """An environment variable holds an unusable value."""


@dataclass(frozen=True)
class Settings:
    """Settings for wiring the pipeline.

    Each field has a ``PAYLOG_*`` environment variable; command line options
    take precedence over them.
    """

    db_path: Optional[str] = None
    owner_id: str = "local"
    max_amount: Decimal = Decimal("10000000")
    retention_days: int = 90
    save_retries: int = 3
    backoff_base: float = 1.0
    dedup_max_age_days: int = 90


def _read(env: Mapping[str, str], name: str, convert, default):
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return convert(raw.strip())
    except (ValueError, InvalidOperation):
        raise ConfigError(f"Invalid value for {name}: {raw!r}")


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from environment variables.

    Args:
        env: Mapping to read instead of ``os.environ``

    Raises:
        ConfigError: If a variable cannot be converted
    """
    env = os.environ if env is None else env
    defaults = Settings()
    settings = Settings(
        db_path=env.get("PAYLOG_DB_PATH") or defaults.db_path,
        owner_id=_read(env, "PAYLOG_OWNER_ID", str, defaults.owner_id),
        max_amount=_read(env, "PAYLOG_MAX_AMOUNT", Decimal, defaults.max_amount),
        retention_days=_read(env, "PAYLOG_RETENTION_DAYS", int, defaults.retention_days),
        save_retries=_read(env, "PAYLOG_SAVE_RETRIES", int, defaults.save_retries),
        backoff_base=_read(env, "PAYLOG_BACKOFF_BASE", float, defaults.backoff_base),
        dedup_max_age_days=_read(env, "PAYLOG_DEDUP_MAX_AGE_DAYS", int, defaults.dedup_max_age_days),
    )
    if settings.max_amount <= 0:
        raise ConfigError("PAYLOG_MAX_AMOUNT must be positive")
    if settings.retention_days < 1 or settings.dedup_max_age_days < 1:
        raise ConfigError("Retention periods must be at least one day")
    if settings.save_retries < 1:
        raise ConfigError("PAYLOG_SAVE_RETRIES must be at least 1")
    if settings.backoff_base < 0:
        raise ConfigError("PAYLOG_BACKOFF_BASE cannot be negative")
    return settings
