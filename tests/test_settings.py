"""Tests for application settings."""

from mapgen.config.settings import Settings


class TestSettings:
    """Test environment-driven settings."""

    def test_defaults(self):
        settings = Settings()
        assert settings.region_target_size == 8
        assert settings.include_rivers is False

    def test_map_size_limits(self):
        settings = Settings()
        assert (settings.max_map_width, settings.max_map_height) == (512, 256)
        assert settings.default_map_width <= settings.max_map_width
        assert settings.default_map_height <= settings.max_map_height

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("MAPGEN_REGION_TARGET_SIZE", "5")
        monkeypatch.setenv("MAPGEN_ALLOWED_ORIGINS", "http://a.test, http://b.test")
        settings = Settings()
        assert settings.region_target_size == 5
        assert settings.origins == ["http://a.test", "http://b.test"]
