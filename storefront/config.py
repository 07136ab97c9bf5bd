"""
Centralized configuration with environment variable overrides.

Storefront endpoints, persistence backend, catalog generation and currency
settings are all configurable here. Nothing is hardcoded in handlers or
client services.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from storefront.logging_context import LOG_FORMAT, install_request_id_filter

load_dotenv()

logger = logging.getLogger(__name__)

VALID_STORE_BACKENDS = ("memory", "redis")


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


def _csv(env_var: str, default: str) -> tuple[str, ...]:
    raw = os.getenv(env_var, default)
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class ApiConfig:
    """HTTP surface settings."""

    path_prefix: str = os.getenv("API_PATH_PREFIX", "/make-server")
    public_key: str = os.getenv("PUBLIC_API_KEY", "storefront-public-anon-key")
    host: str = os.getenv("API_HOST", "127.0.0.1")
    port: int = _safe_int("API_PORT", "8000")
    cors_origins: tuple[str, ...] = _csv("CORS_ORIGINS", "*")


@dataclass(frozen=True)
class StoreConfig:
    """Key-value persistence settings."""

    backend: str = os.getenv("STORE_BACKEND", "memory")
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    cas_max_retries: int = _safe_int("CART_CAS_MAX_RETRIES", "5")


@dataclass(frozen=True)
class CatalogConfig:
    """Availability calendar generation."""

    availability_days: int = _safe_int("AVAILABILITY_DAYS", "90")
    availability_seed: int = _safe_int("AVAILABILITY_SEED", "42")
    night_slot_service_ids: tuple[str, ...] = _csv("NIGHT_SLOT_SERVICE_IDS", "1,3,4")


@dataclass(frozen=True)
class CurrencyConfig:
    """Exchange rate source and caching."""

    rates_url: str = os.getenv("EXCHANGE_RATES_URL", "https://open.er-api.com/v6/latest/USD")
    refresh_interval_sec: float = _safe_float("EXCHANGE_RATES_REFRESH", "300")
    cache_ttl_sec: float = _safe_float("EXCHANGE_RATES_CACHE_TTL", "3600")
    request_timeout_sec: float = _safe_float("EXCHANGE_RATES_TIMEOUT", "10")


@dataclass(frozen=True)
class ClientConfig:
    """Settings for the storefront client services."""

    base_url: str = os.getenv("STOREFRONT_BASE_URL", "http://127.0.0.1:8000/make-server")
    # 0 disables the timeout
    request_timeout_sec: float = _safe_float("STOREFRONT_TIMEOUT", "0")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    api: ApiConfig = field(default_factory=ApiConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    catalog: CatalogConfig = field(default_factory=CatalogConfig)
    currency: CurrencyConfig = field(default_factory=CurrencyConfig)
    client: ClientConfig = field(default_factory=ClientConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    app_name: str = os.getenv("APP_NAME", "adventure-storefront")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if not config.api.path_prefix.startswith("/") or config.api.path_prefix.endswith("/"):
        raise ValueError(
            "API_PATH_PREFIX must start with '/' and not end with '/', "
            f"got {config.api.path_prefix!r}"
        )
    if not config.api.public_key:
        raise ValueError("PUBLIC_API_KEY must not be empty")
    if not 0 < config.api.port < 65536:
        raise ValueError(f"API_PORT must be between 1 and 65535, got {config.api.port}")
    if config.store.backend not in VALID_STORE_BACKENDS:
        raise ValueError(
            f"STORE_BACKEND must be one of {VALID_STORE_BACKENDS}, got {config.store.backend!r}"
        )
    if config.store.backend == "redis" and not config.store.redis_url:
        raise ValueError("REDIS_URL is required when STORE_BACKEND is 'redis'")
    if config.store.cas_max_retries < 1:
        raise ValueError(
            f"CART_CAS_MAX_RETRIES must be >= 1, got {config.store.cas_max_retries}"
        )
    if config.catalog.availability_days < 1:
        raise ValueError(
            f"AVAILABILITY_DAYS must be >= 1, got {config.catalog.availability_days}"
        )
    if config.currency.refresh_interval_sec <= 0:
        raise ValueError(
            "EXCHANGE_RATES_REFRESH must be > 0, "
            f"got {config.currency.refresh_interval_sec}"
        )
    if config.currency.cache_ttl_sec < 0:
        raise ValueError(
            f"EXCHANGE_RATES_CACHE_TTL must be >= 0, got {config.currency.cache_ttl_sec}"
        )
    if config.currency.request_timeout_sec <= 0:
        raise ValueError(
            f"EXCHANGE_RATES_TIMEOUT must be > 0, got {config.currency.request_timeout_sec}"
        )
    if config.client.request_timeout_sec < 0:
        raise ValueError(
            f"STOREFRONT_TIMEOUT must be >= 0, got {config.client.request_timeout_sec}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[install_request_id_filter(logging.StreamHandler())],
    )
    logger.info("Configuration loaded for '%s' (store=%s)", config.app_name, config.store.backend)
    return config


# Singleton instance
settings = load_config()
