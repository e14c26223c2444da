"""Unit tests for builder settings resolution (flags > environment > defaults)."""

from pathlib import Path

from pydantic import ValidationError
import pytest

from module_registry.config import BuilderSettings, load_builder_settings
from module_registry.domain import ConfigurationError

pytestmark = pytest.mark.unit


class TestDefaults:
    """Test default values."""

    def test_Should_UseDefaults_When_NothingConfigured(self):
        settings = load_builder_settings()

        assert settings.registry_url is None
        assert settings.output_dir == Path("./modules")
        assert settings.manifest_path == Path("./registry-manifest.json")
        assert settings.token is None
        assert settings.verbose is False
        assert settings.fetch_timeout_s is None

    def test_Should_RaiseConfigurationError_When_RegistryUrlMissing(self):
        with pytest.raises(ConfigurationError, match="MODULE_REGISTRY_URL"):
            load_builder_settings().require_registry_url()


class TestEnvironment:
    """Test environment fallbacks."""

    def test_Should_ReadRegistryUrlAndToken_When_EnvSet(self, monkeypatch):
        monkeypatch.setenv("MODULE_REGISTRY_URL", "https://env.example.com/registry.yaml")
        monkeypatch.setenv("GITHUB_TOKEN", "env-token")

        settings = load_builder_settings()

        assert settings.require_registry_url() == "https://env.example.com/registry.yaml"
        assert settings.token == "env-token"

    def test_Should_ReadPrefixedSettings_When_EnvSet(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("MODULE_REGISTRY_OUTPUT_DIR", str(tmp_path / "out"))
        monkeypatch.setenv("MODULE_REGISTRY_VERBOSE", "true")
        monkeypatch.setenv("MODULE_REGISTRY_FETCH_TIMEOUT_S", "2.5")

        settings = BuilderSettings()

        assert settings.output_dir == tmp_path / "out"
        assert settings.verbose is True
        assert settings.fetch_timeout_s == 2.5

    def test_Should_TreatBlankTokenAsUnset_When_EnvEmpty(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "")

        assert load_builder_settings().token is None

    def test_Should_RejectTimeout_When_NotPositive(self, monkeypatch):
        monkeypatch.setenv("MODULE_REGISTRY_FETCH_TIMEOUT_S", "0")

        with pytest.raises(ValidationError):
            BuilderSettings()


class TestFlagPriority:
    """Test that explicit flags override the environment."""

    def test_Should_PreferFlags_When_BothSet(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("MODULE_REGISTRY_URL", "https://env.example.com/registry.yaml")
        monkeypatch.setenv("GITHUB_TOKEN", "env-token")
        monkeypatch.setenv("MODULE_REGISTRY_MANIFEST_PATH", str(tmp_path / "env.json"))

        settings = load_builder_settings(
            registry_url="https://flag.example.com/registry.yaml",
            token="flag-token",
            manifest_path=tmp_path / "flag.json",
        )

        assert settings.registry_url == "https://flag.example.com/registry.yaml"
        assert settings.token == "flag-token"
        assert settings.manifest_path == tmp_path / "flag.json"

    def test_Should_KeepEnvVerbose_When_FlagNotGiven(self, monkeypatch):
        monkeypatch.setenv("MODULE_REGISTRY_VERBOSE", "1")

        assert load_builder_settings(verbose=False).verbose is True
