"""Tests for configuration loader."""

import pytest
import yaml
from pathlib import Path
from tempfile import NamedTemporaryFile

from calendar_assistant.config.config_loader import expand_env, from_dict, load_config
from calendar_assistant.config.config_schema import AppConfig


def base_config():
    return {
        "slack": {
            "bot_token": "xoxb-test",
            "signing_secret": "secret",
            "allowed_user_ids": ["U1"],
        },
        "llm": {
            "provider": "anthropic",
            "anthropic": {"api_key": "sk-ant-test"},
        },
    }


def test_load_config_valid():
    """Test loading a valid configuration."""
    config_dict = base_config()
    config_dict["users"] = [
        {"user_id": "U1", "display_name": "Sam", "calendar_id": "primary", "timezone": "America/Denver"}
    ]

    with NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        yaml.dump(config_dict, f)
        config_path = f.name

    try:
        config = load_config(config_path)
        assert isinstance(config, AppConfig)
        assert config.slack.bot_token == "xoxb-test"
        assert config.llm.provider == "anthropic"
        assert config.llm.anthropic.model == "claude-sonnet-4-20250514"
        assert config.users[0].calendar_id == "primary"
    finally:
        Path(config_path).unlink()


def test_defaults():
    """Test defaults of optional sections."""
    config = from_dict(base_config())

    assert config.conversation.ttl_minutes == 30
    assert config.conversation.max_turns == 20
    assert config.conversation.sweep_interval_minutes == 10
    assert config.digest.cron == "0 7 * * *"
    assert config.agent.assistant_name == "Michelle"
    assert config.agent.max_rounds == 10
    assert config.server.port == 3006
    assert config.weather.api_key is None


def test_load_config_missing_file():
    """Test loading a non-existent configuration file."""
    with pytest.raises(FileNotFoundError):
        load_config("nonexistent.yaml")


def test_load_config_empty_file():
    with NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        config_path = f.name

    try:
        with pytest.raises(ValueError):
            load_config(config_path)
    finally:
        Path(config_path).unlink()


def test_load_config_invalid():
    """Test loading an invalid configuration."""
    config_dict = {
        "slack": {"bot_token": "xoxb-test"},  # Missing signing_secret
        "llm": {"provider": "anthropic"},
    }

    with NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        yaml.dump(config_dict, f)
        config_path = f.name

    try:
        with pytest.raises(Exception):  # Should raise validation error
            load_config(config_path)
    finally:
        Path(config_path).unlink()


def test_validate_missing_provider_block():
    config_dict = base_config()
    config_dict["llm"] = {"provider": "openai"}

    with pytest.raises(ValueError, match="openai configuration is required"):
        from_dict(config_dict)


def test_validate_unknown_provider():
    config_dict = base_config()
    config_dict["llm"]["provider"] = "gemini"

    with pytest.raises(ValueError, match="Unknown LLM provider"):
        from_dict(config_dict)


def test_validate_duplicate_calendar_labels():
    config_dict = base_config()
    config_dict["users"] = [
        {
            "user_id": "U1",
            "calendar_id": "primary",
            "calendars": [
                {"label": "Work", "calendar_id": "a"},
                {"label": "work", "calendar_id": "b"},
            ],
        }
    ]

    with pytest.raises(ValueError, match="Duplicate calendar label"):
        from_dict(config_dict)


def test_validate_primary_calendar_must_exist():
    config_dict = base_config()
    config_dict["users"] = [
        {
            "user_id": "U1",
            "calendar_id": "primary",
            "primary_calendar": "business",
            "calendars": [{"label": "work", "calendar_id": "a"}],
        }
    ]

    with pytest.raises(ValueError, match="primary_calendar"):
        from_dict(config_dict)


def test_invalid_timezone_rejected():
    config_dict = base_config()
    config_dict["users"] = [{"user_id": "U1", "calendar_id": "primary", "timezone": "Mars/Olympus"}]

    with pytest.raises(Exception, match="Invalid timezone"):
        from_dict(config_dict)


def test_invalid_cron_rejected():
    config_dict = base_config()
    config_dict["digest"] = {"cron": "0 7 * *"}

    with pytest.raises(Exception, match="cron"):
        from_dict(config_dict)


def test_profile_without_calendar_id_is_loadable():
    config_dict = base_config()
    config_dict["users"] = [{"user_id": "U1", "display_name": "Sam"}]

    config = from_dict(config_dict)
    assert config.users[0].calendar_id is None


def test_expand_env_substitutes_nested_strings():
    raw = {
        "slack": {"bot_token": "${SLACK_BOT_TOKEN}", "allowed_user_ids": ["${OWNER_ID}", "U2"]},
        "server": {"port": 3006},
    }

    expanded = expand_env(raw, {"SLACK_BOT_TOKEN": "xoxb-env", "OWNER_ID": "U1"})

    assert expanded == {
        "slack": {"bot_token": "xoxb-env", "allowed_user_ids": ["U1", "U2"]},
        "server": {"port": 3006},
    }


def test_expand_env_fallback():
    assert expand_env("${TIMEZONE:-America/Denver}", {}) == "America/Denver"
    assert expand_env("${TIMEZONE:-America/Denver}", {"TIMEZONE": "UTC"}) == "UTC"


def test_expand_env_unset_variable_fails():
    with pytest.raises(ValueError, match="SLACK_SIGNING_SECRET"):
        expand_env({"slack": {"signing_secret": "${SLACK_SIGNING_SECRET}"}}, {})


def test_load_config_reads_secrets_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-env")
    config_dict = base_config()
    config_dict["llm"]["anthropic"]["api_key"] = "${ANTHROPIC_API_KEY}"
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.dump(config_dict), encoding="utf-8")

    config = load_config(str(config_path))

    assert config.llm.anthropic.api_key == "sk-ant-env"
