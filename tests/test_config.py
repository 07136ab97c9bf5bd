"""Tests for configuration loading and validation."""

import pytest

from storefront.config import (
    ApiConfig,
    AppConfig,
    CatalogConfig,
    ClientConfig,
    CurrencyConfig,
    StoreConfig,
    _validate_config,
)


class TestConfigValidation:
    def test_default_config_passes_validation(self):
        config = AppConfig()
        _validate_config(config)  # should not raise

    @pytest.mark.parametrize("prefix", ["make-server", "/make-server/"])
    def test_invalid_path_prefix(self, prefix):
        config = AppConfig(api=ApiConfig(path_prefix=prefix))
        with pytest.raises(ValueError, match="API_PATH_PREFIX"):
            _validate_config(config)

    def test_empty_public_key(self):
        with pytest.raises(ValueError, match="PUBLIC_API_KEY"):
            _validate_config(AppConfig(api=ApiConfig(public_key="")))

    def test_invalid_port(self):
        with pytest.raises(ValueError, match="API_PORT"):
            _validate_config(AppConfig(api=ApiConfig(port=70000)))

    def test_unknown_store_backend(self):
        with pytest.raises(ValueError, match="STORE_BACKEND"):
            _validate_config(AppConfig(store=StoreConfig(backend="sqlite")))

    def test_redis_requires_url(self):
        with pytest.raises(ValueError, match="REDIS_URL"):
            _validate_config(AppConfig(store=StoreConfig(backend="redis", redis_url="")))

    def test_cas_retries_at_least_one(self):
        with pytest.raises(ValueError, match="CART_CAS_MAX_RETRIES"):
            _validate_config(AppConfig(store=StoreConfig(cas_max_retries=0)))

    def test_availability_days_positive(self):
        with pytest.raises(ValueError, match="AVAILABILITY_DAYS"):
            _validate_config(AppConfig(catalog=CatalogConfig(availability_days=0)))

    def test_refresh_interval_positive(self):
        with pytest.raises(ValueError, match="EXCHANGE_RATES_REFRESH"):
            _validate_config(AppConfig(currency=CurrencyConfig(refresh_interval_sec=0)))

    @pytest.mark.parametrize("timeout", [0, -1])
    def test_rates_timeout_positive(self, timeout):
        with pytest.raises(ValueError, match="EXCHANGE_RATES_TIMEOUT"):
            _validate_config(AppConfig(currency=CurrencyConfig(request_timeout_sec=timeout)))

    def test_negative_timeout(self):
        with pytest.raises(ValueError, match="STOREFRONT_TIMEOUT"):
            _validate_config(AppConfig(client=ClientConfig(request_timeout_sec=-1)))

    def test_zero_timeout_allowed(self):
        _validate_config(AppConfig(client=ClientConfig(request_timeout_sec=0)))

    def test_safe_int_parsing(self):
        from storefront.config import _safe_int

        assert _safe_int("NONEXISTENT_VAR_12345", "42") == 42

    def test_safe_int_rejects_garbage(self, monkeypatch):
        from storefront.config import _safe_int

        monkeypatch.setenv("STOREFRONT_TEST_INT", "many")
        with pytest.raises(ValueError, match="STOREFRONT_TEST_INT"):
            _safe_int("STOREFRONT_TEST_INT", "1")

    def test_safe_float_parsing(self):
        from storefront.config import _safe_float

        assert _safe_float("NONEXISTENT_VAR_12345", "3.14") == pytest.approx(3.14)

    def test_csv_parsing(self, monkeypatch):
        from storefront.config import _csv

        monkeypatch.setenv("STOREFRONT_TEST_CSV", " 1, 3 ,,4 ")
        assert _csv("STOREFRONT_TEST_CSV", "") == ("1", "3", "4")
