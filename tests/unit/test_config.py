"""Test configuration management."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from moviehub.config import Config, ConfigManager
from moviehub.config.config_manager import candidate_paths
from moviehub.config.models import AggregationConfig, CacheConfig, LLMConfig, WorkflowConfig


def test_config_manager_loads_config(config_manager):
    """Test that config manager loads configuration correctly."""
    config = config_manager.load_config()

    assert isinstance(config, Config)
    assert config.llm.provider == "openai"
    assert config.llm.model == "gpt-4o-mini"
    assert config.tmdb.api_key == "test-tmdb-key"
    assert config.cache.key_prefix == "test"
    assert config.workflow.gateway == "local"
    assert config.server.port == 3000


def test_config_manager_caches_config(config_manager):
    """Test that config manager caches loaded configuration."""
    config1 = config_manager.load_config()
    config2 = config_manager.get_config()

    assert config1 is config2


def test_config_manager_reload_config(config_manager):
    """Test that config manager can reload configuration."""
    config1 = config_manager.load_config()
    config2 = config_manager.reload_config()

    assert config1 is not config2
    assert config1.llm.provider == config2.llm.provider


def test_config_manager_missing_file():
    """Test that config manager raises error for missing file."""
    config_manager = ConfigManager(Path("nonexistent.yaml"))

    with pytest.raises(FileNotFoundError):
        config_manager.load_config()


def test_config_expands_environment_variables(tmp_path, monkeypatch):
    """Test that ${VAR} references are read from the environment."""
    monkeypatch.setenv("MOVIEHUB_TEST_TMDB_KEY", "from-env")
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        'tmdb:\n  api_key: "${MOVIEHUB_TEST_TMDB_KEY}"\nomdb:\n  api_key: "omdb"\n'
    )

    config = ConfigManager(config_file).load_config()

    assert config.tmdb.api_key == "from-env"
    assert config.llm.usable is False


def test_config_validation_invalid_provider(tmp_path):
    """Test config validation with invalid LLM provider."""
    config_content = """
llm:
  provider: "invalid"
  model: "test"
  api_key: "test"
tmdb:
  api_key: "test"
omdb:
  api_key: "test"
"""
    config_file = tmp_path / "invalid.yaml"
    config_file.write_text(config_content)

    config_manager = ConfigManager(config_file)

    with pytest.raises(ValueError, match="Configuration validation failed"):
        config_manager.load_config()


def test_config_requires_provider_keys(tmp_path):
    """Test that the TMDb and OMDb sections are mandatory."""
    config_file = tmp_path / "partial.yaml"
    config_file.write_text('llm:\n  enabled: false\n')

    with pytest.raises(ValueError):
        ConfigManager(config_file).load_config()


def test_create_default_config(tmp_path):
    """Test creating default configuration file."""
    output_path = tmp_path / "default_config.yaml"

    ConfigManager.create_default_config(output_path)

    assert output_path.exists()

    # Should be able to load the created config
    config_manager = ConfigManager(output_path)
    config = config_manager.load_config()
    assert isinstance(config, Config)


def test_validate_config_file(config_manager, temp_config_file, tmp_path):
    """Test validation of files other than the loaded one."""
    broken = tmp_path / "broken.yaml"
    broken.write_text("- just\n- a list\n")

    assert config_manager.validate_config_file(temp_config_file) is True
    assert config_manager.validate_config_file(broken) is False
    assert config_manager.validate_config_file(tmp_path / "missing.yaml") is False


@pytest.mark.parametrize(
    "enabled,api_key,usable",
    [
        (True, "sk-123", True),
        (False, "sk-123", False),
        (True, "", False),
        (True, "${UNSET_OPENAI_KEY}", False),
    ],
)
def test_llm_usable(enabled, api_key, usable, monkeypatch):
    monkeypatch.delenv("UNSET_OPENAI_KEY", raising=False)

    assert LLMConfig(enabled=enabled, api_key=api_key).usable is usable


def test_section_validators():
    """Test the enumerated settings."""
    assert CacheConfig(backend="REDIS").backend == "redis"
    assert WorkflowConfig(gateway="HTTP").gateway == "http"

    with pytest.raises(ValidationError):
        AggregationConfig(default_sort="rating")
    with pytest.raises(ValidationError):
        CacheConfig(backend="memcached")
    with pytest.raises(ValidationError):
        WorkflowConfig(gateway="grpc")


def test_config_env_var_is_searched_first(monkeypatch, temp_config_file):
    """Test that MOVIEHUB_CONFIG leads the search path and is picked up."""
    monkeypatch.setenv("MOVIEHUB_CONFIG", str(temp_config_file))

    assert candidate_paths()[0] == temp_config_file
    assert ConfigManager().load_config().cache.key_prefix == "test"
