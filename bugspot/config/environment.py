"""
Environment Configuration Module

Loads environment variables (and a ``.env`` file from the working directory,
when present) for the BugSpot reporter.
"""
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

_env_loaded = False


def load_env_file(env_path: Optional[str] = None) -> bool:
    """Load a .env file once. Existing environment variables win.

    Returns:
        True if a file was loaded
    """
    global _env_loaded
    if _env_loaded and env_path is None:
        return False
    path = Path(env_path) if env_path else Path.cwd() / '.env'
    _env_loaded = True
    if not path.exists():
        return False
    return load_dotenv(dotenv_path=path, override=False)


def env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}") from None
