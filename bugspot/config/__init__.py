"""
Configuration management - externalized and extensible.
"""
from dataclasses import dataclass, replace
from typing import Optional

from .environment import env_bool, env_float, env_str, load_env_file

DEFAULT_API_URL = "https://api.bugspot.dev"
DEFAULT_STORAGE_DIR = "~/.bugspot"


@dataclass(frozen=True)
class WidgetConfig:
    """Widget configuration."""
    api_key: Optional[str] = None
    api_url: str = DEFAULT_API_URL
    timeout: float = 10.0
    enable_screenshot: bool = True
    show_preview: bool = True
    collect_context: bool = False
    backend: str = "api"
    storage: str = "file"
    storage_dir: str = DEFAULT_STORAGE_DIR
    log_level: str = "WARNING"
    log_json: bool = False

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> 'WidgetConfig':
        """Create config from environment variables (and .env)."""
        load_env_file(env_file)
        return cls(
            api_key=env_str("BUGSPOT_API_KEY"),
            api_url=env_str("BUGSPOT_API_URL", DEFAULT_API_URL),
            timeout=env_float("BUGSPOT_TIMEOUT", 10.0),
            enable_screenshot=env_bool("BUGSPOT_ENABLE_SCREENSHOT", True),
            show_preview=env_bool("BUGSPOT_SHOW_PREVIEW", True),
            collect_context=env_bool("BUGSPOT_COLLECT_CONTEXT", False),
            backend=env_str("BUGSPOT_BACKEND", "api").lower(),
            storage=env_str("BUGSPOT_STORAGE", "file").lower(),
            storage_dir=env_str("BUGSPOT_STORAGE_DIR", DEFAULT_STORAGE_DIR),
            log_level=env_str("BUGSPOT_LOG_LEVEL", "WARNING").upper(),
            log_json=env_bool("BUGSPOT_LOG_JSON", False),
        )

    def with_overrides(self, **overrides) -> 'WidgetConfig':
        """Copy with non-None overrides applied (used by the CLI)."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)


__all__ = ['WidgetConfig', 'DEFAULT_API_URL', 'DEFAULT_STORAGE_DIR', 'load_env_file']
