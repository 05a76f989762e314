"""
guardian/config.py
Deployment config. Persists to guardian_config.json in the project root;
missing keys fall back to DEFAULT_CONFIG.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "guardian_config.json"

# Seeded into safe-contacts.json on first run only.
DEFAULT_SAFE_CONTACTS = [
    {"id": 1, "name": "Dr. Smith",    "phone": "555-0101"},
    {"id": 2, "name": "Daughter Amy", "phone": "555-0102"},
    {"id": 3, "name": "Pharmacy",     "phone": "555-0103"},
]

DEFAULT_CONFIG: Dict[str, Any] = {
    "data_dir": "data",
    "host": "127.0.0.1",
    "port": 3000,
    "alert_list_limit": 20,
    "safe_contacts": DEFAULT_SAFE_CONTACTS,
    "cors_origins": [
        "http://localhost",
        "http://localhost:3000",
        "http://127.0.0.1",
        "http://127.0.0.1:3000",
    ],
}


def _config_path(project_root: Optional[Path] = None) -> Path:
    root = project_root or Path.cwd()
    return Path(root) / CONFIG_FILENAME


def load_config(project_root: Optional[Path] = None) -> Dict[str, Any]:
    """Load config from guardian_config.json. Returns defaults if missing or unreadable."""
    path = _config_path(project_root)
    defaults = copy.deepcopy(DEFAULT_CONFIG)
    if path.exists():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            if isinstance(data, dict):
                return {**defaults, **data}
            logger.warning(f"Config load failed: {path} is not a JSON object")
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Config load failed: {e}")
    return defaults


def save_config(config: Dict[str, Any], project_root: Optional[Path] = None) -> Path:
    """Persist config to guardian_config.json."""
    path = _config_path(project_root)
    path.write_text(json.dumps(config, indent=2), encoding="utf-8")
    return path


def resolve_data_dir(config: Dict[str, Any], project_root: Optional[Path] = None) -> Path:
    """data_dir from config; relative paths are taken from the project root."""
    data_dir = Path(config.get("data_dir") or DEFAULT_CONFIG["data_dir"])
    if not data_dir.is_absolute():
        data_dir = Path(project_root or Path.cwd()) / data_dir
    return data_dir
