"""Configuration models and loading."""

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

CONFIG_DIR = Path.home() / ".config" / "ultraviolet-relay"
CONFIG_FILE = CONFIG_DIR / "config.json"

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; UltravioletProxy/0.1)"


class ProxySettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str = "127.0.0.1"
    port: int = 8080
    debug: bool = False


class RelaySettings(BaseModel):
    """Settings shared by the link rewriter and the injected overlay script."""

    model_config = ConfigDict(frozen=True)

    base_path: str = "/api/proxy"
    target_param: str = "u"
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = 30.0


class CorsSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    allowed_origins: tuple[str, ...] = ("*",)


class Config(BaseModel):
    model_config = ConfigDict(frozen=True)

    proxy: ProxySettings = Field(default_factory=ProxySettings)
    relay: RelaySettings = Field(default_factory=RelaySettings)
    cors: CorsSettings = Field(default_factory=CorsSettings)


def load_config() -> Config:
    """Load configuration from JSON file, creating default if needed."""
    if not CONFIG_FILE.exists():
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        default = Config()
        CONFIG_FILE.write_text(default.model_dump_json(indent=2))
        return default

    try:
        data = json.loads(CONFIG_FILE.read_text())
        return Config.model_validate(data)
    except (json.JSONDecodeError, ValidationError):
        # Backup corrupted config and recreate default
        backup = CONFIG_FILE.with_suffix(".json.bak")
        CONFIG_FILE.rename(backup)
        default = Config()
        CONFIG_FILE.write_text(default.model_dump_json(indent=2))
        return default
