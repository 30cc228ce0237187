"""
Unit tests for configuration module.
"""
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from mdplay.core import Settings, get_settings
from mdplay.core.config import STARTER_SLIDE_NAME


class TestSettings:
    """Tests for Settings class."""
    
    def test_default_values(self, clean_environment):
        """Test that default values are set correctly."""
        settings = Settings(_env_file=None)
        
        assert settings.app_name == "mdplay"
        assert settings.presenter_port == 3333
        assert settings.reload_debounce_ms == 100
        assert settings.default_slides_dir == Path("slides")
        assert settings.deck_dir == Path(".deck")
        assert settings.player_command == "asciinema"
        assert settings.player_args == ["play", "-q", "-i", "0.5", "-s", "1.5"]
        assert settings.cast_padding == 4
        assert settings.debug is False
    
    def test_port_validation(self, clean_environment):
        """Test that port validation works."""
        with pytest.raises(ValueError):
            Settings(_env_file=None, presenter_port=0)
        
        with pytest.raises(ValueError):
            Settings(_env_file=None, presenter_port=70000)
        
        settings = Settings(_env_file=None, presenter_port=8080)
        assert settings.presenter_port == 8080
        assert settings.presenter_url == "http://localhost:8080"
    
    def test_log_level_is_normalized(self, clean_environment):
        """Test that log level names are upper-cased and checked."""
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"
        
        with pytest.raises(ValueError):
            Settings(_env_file=None, log_level="chatty")
    
    def test_header_fonts_required(self, clean_environment):
        """Test that an empty font list is rejected."""
        with pytest.raises(ValueError):
            Settings(_env_file=None, header_fonts=[])
    
    @patch.dict(os.environ, {"MDPLAY_PRESENTER_PORT": "4444", "MDPLAY_DEFAULT_THEME": "amber"})
    def test_environment_overrides(self):
        """Test that MDPLAY_* variables override defaults."""
        settings = Settings(_env_file=None)
        
        assert settings.presenter_port == 4444
        assert settings.default_theme == "amber"
    
    def test_ensure_default_deck_creates_starter(self, tmp_path, clean_environment):
        """Test provisioning of the fallback directory."""
        settings = Settings(_env_file=None)
        target = tmp_path / "slides"
        
        assert settings.ensure_default_deck(target) is True
        assert (target / STARTER_SLIDE_NAME).is_file()
        # Existing directories are left alone
        assert settings.ensure_default_deck(target) is False
    
    def test_ensure_default_deck_disabled(self, tmp_path, clean_environment):
        """Test that provisioning can be turned off."""
        settings = Settings(_env_file=None, auto_create_default=False)
        
        assert settings.ensure_default_deck(tmp_path / "slides") is False
        assert not (tmp_path / "slides").exists()


class TestGetSettings:
    """Tests for get_settings function."""
    
    def test_returns_settings_instance(self, clean_environment):
        """Test that get_settings returns a Settings instance."""
        settings = get_settings()
        assert isinstance(settings, Settings)
    
    def test_caching(self, clean_environment):
        """Test that settings are cached."""
        assert get_settings() is get_settings()
