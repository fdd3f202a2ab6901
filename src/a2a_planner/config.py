# src/a2a_planner/config.py
from __future__ import annotations

from typing import Annotated, Any, List, Literal
from pydantic import Field, AliasChoices, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
import json


def _parse_bool(value: Any) -> bool:
    """
    Robust bool parser:
    - handles actual bools
    - strips inline comments like 'false   # note'
    - accepts common truthy/falsey tokens
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        v = value.split("#", 1)[0].strip().lower()
        if v in {"1", "true", "yes", "y", "on"}:
            return True
        if v in {"0", "false", "no", "n", "off", ""}:
            return False
    return bool(value)


def _parse_list(value: Any) -> List[str]:
    """
    Accept a native list, a JSON list string ('["*","https://a.com"]')
    or a CSV string ('*,https://a.com'). Empty -> [].
    """
    if isinstance(value, list):
        return [str(x).strip() for x in value]
    if isinstance(value, str):
        raw = value.split("#", 1)[0].strip()
        if not raw:
            return []
        if raw.startswith("[") and raw.endswith("]"):
            try:
                data = json.loads(raw)
            except ValueError:
                data = None
            if isinstance(data, list):
                return [str(x).strip() for x in data]
        return [s.strip() for s in raw.split(",") if s.strip()]
    return [str(value).strip()]


def _normalize_push_mode(value: Any) -> str:
    """Normalize to log | webhook; unknown -> log."""
    if not isinstance(value, str):
        return "log"
    v = value.split("#", 1)[0].strip().lower()
    return v if v in {"log", "webhook"} else "log"


class Settings(BaseSettings):
    """
    Runtime configuration, read from the environment (and `.env`).

    Field names are lowercase; the UPPERCASE env names work too because
    lookups are case-insensitive and every field carries an alias.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Identity & protocol
    # ------------------------------------------------------------------
    agent_name: str = Field(
        default="Planner Agent",
        validation_alias=AliasChoices("AGENT_NAME", "agent_name"),
    )
    agent_description: str = Field(
        default="Turns a goal or problem into a clear, actionable plan.",
        validation_alias=AliasChoices("AGENT_DESCRIPTION", "agent_description"),
    )
    agent_version: str = Field(
        default="1.0.0",
        validation_alias=AliasChoices("AGENT_VERSION", "agent_version"),
    )
    protocol_version: str = Field(
        default="0.3.0",
        validation_alias=AliasChoices("PROTOCOL_VERSION", "protocol_version"),
    )

    # ------------------------------------------------------------------
    # Network / URLs
    # ------------------------------------------------------------------
    a2a_host: str = Field(
        default="0.0.0.0",
        validation_alias=AliasChoices("A2A_HOST", "a2a_host"),
    )
    a2a_port: int = Field(
        default=8000,
        validation_alias=AliasChoices("A2A_PORT", "a2a_port"),
    )
    # Kept as str so 'http://localhost' style values pass unchanged
    public_url: str = Field(
        default="http://localhost:8000",
        validation_alias=AliasChoices("PUBLIC_URL", "public_url"),
    )

    # ------------------------------------------------------------------
    # Model provider & memory
    # ------------------------------------------------------------------
    llm_provider: str = Field(
        default="echo",
        validation_alias=AliasChoices("LLM_PROVIDER", "llm_provider"),
    )
    memory_enabled: bool = Field(
        default=True,
        validation_alias=AliasChoices("MEMORY_ENABLED", "memory_enabled"),
    )
    memory_db_path: str = Field(
        default="planner_memory.db",
        validation_alias=AliasChoices("MEMORY_DB_PATH", "memory_db_path"),
    )
    memory_last_messages: int = Field(
        default=10,
        ge=0,
        validation_alias=AliasChoices("MEMORY_LAST_MESSAGES", "memory_last_messages"),
    )

    # ------------------------------------------------------------------
    # Push notifications (non-blocking requests)
    # ------------------------------------------------------------------
    push_notifications: Literal["log", "webhook"] = Field(
        default="log",
        validation_alias=AliasChoices("PUSH_NOTIFICATIONS", "push_notifications"),
    )
    webhook_timeout: float = Field(
        default=10.0,
        gt=0,
        validation_alias=AliasChoices("WEBHOOK_TIMEOUT", "webhook_timeout"),
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("LOG_LEVEL", "log_level"),
    )

    # ------------------------------------------------------------------
    # CORS (strings or lists; '*' means allow all)
    # ------------------------------------------------------------------
    cors_allow_origins: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["*"],
        validation_alias=AliasChoices("CORS_ALLOW_ORIGINS", "cors_allow_origins"),
    )
    cors_allow_methods: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["*"],
        validation_alias=AliasChoices("CORS_ALLOW_METHODS", "cors_allow_methods"),
    )
    cors_allow_headers: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["*"],
        validation_alias=AliasChoices("CORS_ALLOW_HEADERS", "cors_allow_headers"),
    )
    cors_allow_credentials: bool = Field(
        default=False,
        validation_alias=AliasChoices("CORS_ALLOW_CREDENTIALS", "cors_allow_credentials"),
    )

    # -------------------------
    # Validators (robust input)
    # -------------------------
    @field_validator(
        "cors_allow_origins",
        "cors_allow_methods",
        "cors_allow_headers",
        mode="before",
    )
    @classmethod
    def _val_lists(cls, v: Any) -> List[str]:
        return _parse_list(v)

    @field_validator("cors_allow_credentials", "memory_enabled", mode="before")
    @classmethod
    def _val_bools(cls, v: Any) -> bool:
        return _parse_bool(v)

    @field_validator("push_notifications", mode="before")
    @classmethod
    def _val_push_mode(cls, v: Any) -> str:
        return _normalize_push_mode(v)

    @field_validator("llm_provider", mode="before")
    @classmethod
    def _val_provider(cls, v: Any) -> str:
        return (str(v or "echo").split("#", 1)[0].strip().lower()) or "echo"

    @property
    def agent_url_base(self) -> str:
        return (self.public_url or "http://localhost:8000").rstrip("/")


# Singleton settings instance
settings = Settings()
