"""Configuration loader with YAML parsing, env-var interpolation, and Pydantic validation."""

from __future__ import annotations

import os
import re
from datetime import timedelta
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

DEFAULT_SYSTEM_PROMPT = (
    "Eres un asistente experto en gestión de e-commerce. "
    "La fecha actual es {current_date}. "
    "Usa las herramientas proporcionadas para dar respuestas basadas en datos reales. "
    "Si el usuario pide un reporte, resume los datos de forma profesional en formato Markdown."
)


class AnthropicConfig(BaseModel):
    api_key: str
    base_url: Optional[str] = None
    max_retries: int = 3
    timeout: int = 120


class AssistantConfig(BaseModel):
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 1000
    temperature: float = 0.7
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    max_tool_rounds: int = Field(default=10, ge=1)
    tools: list[str] = Field(default_factory=list)  # empty = every registered tool


class StorageConfig(BaseModel):
    db_path: str = "./data/venti.db"
    persist: bool = True
    session_key: str = "venti_ai_chat_history"
    ttl_hours: float = Field(default=24, gt=0)

    @property
    def ttl(self) -> timedelta:
        return timedelta(hours=self.ttl_hours)


class AppConfig(BaseModel):
    log_level: str = "INFO"
    json_logs: bool = False
    data_dir: str = "./data"
    tenant_id: Optional[str] = None
    anthropic: Optional[AnthropicConfig] = None
    assistant: AssistantConfig = Field(default_factory=AssistantConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)


_ENV_VAR_PATTERN = re.compile(r"\$\{(\w+)\}")


def _interpolate_env_vars(text: str, extra: dict[str, str] | None = None) -> str:
    """Replace ${VAR_NAME} patterns with environment variable values."""

    def _replace(match: re.Match) -> str:
        var_name = match.group(1)
        if extra and var_name in extra:
            return extra[var_name]
        value = os.environ.get(var_name)
        if value is None:
            return match.group(0)
        return value

    return _ENV_VAR_PATTERN.sub(_replace, text)


def load_config(config_path: str | Path = "config.yaml", env_path: str | Path = ".env") -> AppConfig:
    """Load and validate configuration from YAML file with env-var interpolation."""
    env_file = Path(env_path)
    if env_file.exists():
        load_dotenv(env_file)

    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_file}")

    raw_text = config_file.read_text(encoding="utf-8")

    # data_dir may be referenced by other values as ${data_dir}
    raw_data = yaml.safe_load(raw_text) or {}
    data_dir = _interpolate_env_vars(str(raw_data.get("data_dir", "./data")))

    interpolated = _interpolate_env_vars(raw_text, extra={"data_dir": data_dir})
    data = yaml.safe_load(interpolated) or {}

    # An unset ${VENTI_TENANT_ID} stays literal; treat it as "no tenant selected"
    tenant_id = data.get("tenant_id")
    if isinstance(tenant_id, str) and _ENV_VAR_PATTERN.fullmatch(tenant_id.strip()):
        data["tenant_id"] = None

    return AppConfig(**data)
