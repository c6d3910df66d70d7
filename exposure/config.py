"""
exposure/config.py
Config with export auto-detection. Persists to exposure_config.json.

Covers I/O and service settings only. The analysis thresholds are fixed
in their modules and are not configurable.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "exposure_config.json"

DEFAULT_CONFIG = {
    "export_path": None,
    "output_path": "analysis.json",
    "api_host": "127.0.0.1",
    "api_port": 8765,
    "pretty": True,
    "include_envelope": False,
}

EXPORT_FILENAME = "conversations.json"

# Where unzipped ChatGPT exports usually end up (cwd is checked first)
AUTO_DETECT_PATHS = [
    Path.home() / "Downloads",
    Path.home() / "Downloads" / "chatgpt-export",
    Path.home(),
]


def _config_path(project_root: Optional[Path] = None) -> Path:
    root = project_root or Path.cwd()
    return root / CONFIG_FILENAME


def load_config(project_root: Optional[Path] = None) -> Dict[str, Any]:
    """Load config from exposure_config.json. Returns defaults if missing."""
    path = _config_path(project_root)
    if path.exists():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            if isinstance(data, dict):
                return {**DEFAULT_CONFIG, **data}
            logger.warning(f"Config {path} is not a JSON object — using defaults")
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Config load failed: {e}")
    return dict(DEFAULT_CONFIG)


def save_config(config: Dict[str, Any], project_root: Optional[Path] = None) -> Path:
    """Persist config to exposure_config.json."""
    path = _config_path(project_root)
    path.write_text(json.dumps(config, indent=2), encoding="utf-8")
    return path


def auto_detect_export(search_paths: Optional[list] = None) -> Optional[Path]:
    """Return the first conversations.json found in the usual places, or None."""
    for d in search_paths or [Path.cwd(), *AUTO_DETECT_PATHS]:
        candidate = Path(d) / EXPORT_FILENAME
        try:
            if candidate.is_file():
                return candidate
        except OSError:
            continue
    return None


def ensure_config(project_root: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load config. Auto-detect export_path if not set.
    Returns merged config.
    """
    config = load_config(project_root)
    if not config.get("export_path"):
        detected = auto_detect_export()
        if detected:
            config["export_path"] = str(detected)
            logger.info(f"Auto-detected export: {detected}")
    return config
