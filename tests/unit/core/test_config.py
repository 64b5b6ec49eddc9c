"""Unit tests for configuration."""
import pytest
from pydantic import ValidationError

from ticker_registry.core.config import RegistryConfig, Settings
from ticker_registry.services.similarity import DEFAULT_SIMILARITY_THRESHOLD


@pytest.mark.unit
class TestRegistryConfig:
    """Test RegistryConfig defaults and validation."""

    def test_defaults(self):
        """✅ 10 minute TTL, 0.8 threshold, 2-10 chars."""
        config = RegistryConfig()

        assert config.reservation_ttl_ms == 600000
        assert config.reservation_ttl_minutes == 10
        assert config.similarity_threshold == 0.8
        assert config.min_length == 2
        assert config.max_length == 10
        assert config.sweep_on_write is True

    def test_threshold_defaults_share_one_constant(self):
        """✅ Config and settings default to the similarity module's threshold."""
        assert RegistryConfig().similarity_threshold == DEFAULT_SIMILARITY_THRESHOLD
        assert Settings().similarity_threshold == DEFAULT_SIMILARITY_THRESHOLD

    @pytest.mark.parametrize("threshold", [0.0, 1.0, -0.1, 1.5])
    def test_threshold_open_interval(self, threshold):
        """✅ Threshold must be inside (0, 1)."""
        with pytest.raises(ValidationError):
            RegistryConfig(similarity_threshold=threshold)

    def test_ttl_positive(self):
        """✅ TTL must be positive."""
        with pytest.raises(ValidationError):
            RegistryConfig(reservation_ttl_ms=0)

    def test_length_window(self):
        """✅ max_length >= min_length."""
        with pytest.raises(ValidationError):
            RegistryConfig(min_length=5, max_length=3)


@pytest.mark.unit
class TestSettings:
    """Test Settings parsing."""

    def test_registry_config(self):
        """✅ Flat settings → RegistryConfig."""
        settings = Settings(
            reservation_ttl_minutes=5,
            similarity_threshold=0.9,
            ticker_min_length=1,
            ticker_max_length=8,
            sweep_on_write=False
        )

        config = settings.registry_config()

        assert config.reservation_ttl_ms == 300000
        assert config.similarity_threshold == 0.9
        assert config.min_length == 1
        assert config.max_length == 8
        assert config.sweep_on_write is False

    def test_log_level_normalized(self):
        """✅ Log level uppercased."""
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        """✅ Unknown log level rejected."""
        with pytest.raises(ValidationError):
            Settings(log_level="LOUD")

    def test_store_backend(self):
        """✅ Backend validated and lowercased."""
        assert Settings(store_backend="REDIS").store_backend == "redis"
        with pytest.raises(ValidationError):
            Settings(store_backend="mongo")

    def test_cors_origins_list(self):
        """✅ Comma-separated origins."""
        settings = Settings(cors_origins="http://a.test, http://b.test,")

        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]
