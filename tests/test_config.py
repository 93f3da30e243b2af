"""
Test per ECIESSettings / load_settings
"""

import pytest

from config.ecies_config import ECIES_SETTINGS, ECIESSettings, load_settings
from protocols.ecies import create_engine


class TestSettings:
    """Test configurazione da environment"""

    def test_defaults(self):
        settings = load_settings({})
        assert settings == ECIES_SETTINGS
        assert settings.backend == "native"
        assert settings.validation_cache_size == 256
        assert settings.metrics_enabled is True

    def test_overrides(self, tmp_path):
        settings = load_settings(
            {
                "ECIES_BACKEND": " Software ",
                "ECIES_CACHE_SIZE": "16",
                "ECIES_LOG_LEVEL": "debug",
                "ECIES_LOG_DIR": str(tmp_path),
                "ECIES_METRICS": "off",
            }
        )
        assert settings.backend == "software"
        assert settings.validation_cache_size == 16
        assert settings.log_level == "DEBUG"
        assert settings.log_dir == str(tmp_path)
        assert settings.metrics_enabled is False

    @pytest.mark.parametrize(
        "environ, message",
        [
            ({"ECIES_CACHE_SIZE": "many"}, "ECIES_CACHE_SIZE must be an integer"),
            ({"ECIES_CACHE_SIZE": "-1"}, "ECIES_CACHE_SIZE must be >= 0"),
            ({"ECIES_METRICS": "maybe"}, "ECIES_METRICS must be a boolean"),
            ({"ECIES_BACKEND": "  "}, "ECIES_BACKEND must not be empty"),
        ],
    )
    def test_invalid_values(self, environ, message):
        with pytest.raises(ValueError, match=message):
            load_settings(environ)

    def test_reads_os_environ(self, monkeypatch):
        monkeypatch.setenv("ECIES_BACKEND", "pure")
        assert load_settings().backend == "pure"

    def test_settings_are_frozen(self):
        with pytest.raises(Exception):
            ECIES_SETTINGS.backend = "software"

    def test_engine_from_settings(self):
        settings = ECIESSettings(backend="software", validation_cache_size=3, metrics_enabled=False)
        engine = create_engine(settings=settings)
        assert engine.backend.name == "software"
        assert engine.cache_stats()["maxsize"] == 3
        assert engine._metrics is None
