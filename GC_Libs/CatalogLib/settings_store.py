"""
Local settings persistence for Gear Cutout.

Settings live in a small JSON key-value file under a base directory. The
naming-service credential is loaded once at startup and written only on an
explicit save.

Functions:
    get_settings_path: Location of the settings file
    load_settings: Read all settings (empty on a missing or corrupt file)
    save_settings: Write all settings
    load_api_key: Read the naming-service credential
    save_api_key: Persist the naming-service credential
"""

import json
from pathlib import Path
from typing import Any, Dict

from GC_Libs.constants import FIELD_API_KEY, SETTINGS_FILE_NAME


def get_settings_path(base_dir: Path) -> Path:
    return Path(base_dir) / SETTINGS_FILE_NAME


def load_settings(base_dir: Path) -> Dict[str, Any]:
    settings_path = get_settings_path(base_dir)
    try:
        payload = json.loads(settings_path.read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        return {}

    if not isinstance(payload, dict):
        return {}
    return payload


def save_settings(base_dir: Path, settings: Dict[str, Any]) -> Path:
    settings_path = get_settings_path(base_dir)
    settings_path.parent.mkdir(parents=True, exist_ok=True)
    settings_path.write_text(json.dumps(settings, indent=2, ensure_ascii=False), encoding="utf-8")
    return settings_path


def load_api_key(base_dir: Path) -> str:
    """
    Load the stored naming-service API key.

    Returns:
        The key, or an empty string if none is stored
    """
    value = load_settings(base_dir).get(FIELD_API_KEY)
    return str(value).strip() if value else ""


def save_api_key(base_dir: Path, api_key: str) -> str:
    """
    Store the naming-service API key, keeping any other settings.

    Args:
        base_dir: Directory holding the settings file
        api_key: Key to store (surrounding whitespace is trimmed)

    Returns:
        The trimmed key that was stored
    """
    trimmed = str(api_key).strip()
    settings = load_settings(base_dir)
    settings[FIELD_API_KEY] = trimmed
    save_settings(base_dir, settings)
    return trimmed
