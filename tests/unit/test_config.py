from datetime import timedelta

import pytest

from venti_assistant.config import DEFAULT_SYSTEM_PROMPT, load_config


def test_load_config_interpolates_env_and_data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")
    monkeypatch.setenv("VENTI_TENANT_ID", "tenant-42")
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        """
data_dir: /srv/venti
tenant_id: ${VENTI_TENANT_ID}
anthropic:
  api_key: ${ANTHROPIC_API_KEY}
assistant:
  max_tool_rounds: 4
  tools: [get_orders]
storage:
  db_path: ${data_dir}/venti.db
  ttl_hours: 12
""",
        encoding="utf-8",
    )

    config = load_config(config_file, tmp_path / "missing.env")

    assert config.tenant_id == "tenant-42"
    assert config.anthropic.api_key == "sk-test"
    assert config.assistant.max_tool_rounds == 4
    assert config.assistant.tools == ["get_orders"]
    assert config.storage.db_path == "/srv/venti/venti.db"
    assert config.storage.ttl == timedelta(hours=12)


def test_unset_tenant_variable_means_no_tenant(tmp_path, monkeypatch):
    monkeypatch.delenv("VENTI_TENANT_ID_UNSET", raising=False)
    config_file = tmp_path / "config.yaml"
    config_file.write_text("tenant_id: ${VENTI_TENANT_ID_UNSET}\n", encoding="utf-8")

    config = load_config(config_file, tmp_path / "missing.env")

    assert config.tenant_id is None


def test_defaults(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("log_level: DEBUG\n", encoding="utf-8")

    config = load_config(config_file, tmp_path / "missing.env")

    assert config.anthropic is None
    assert config.assistant.max_tokens == 1000
    assert config.assistant.max_tool_rounds == 10
    assert config.assistant.system_prompt == DEFAULT_SYSTEM_PROMPT
    assert config.storage.session_key == "venti_ai_chat_history"
    assert config.storage.ttl == timedelta(hours=24)


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml", tmp_path / "missing.env")
