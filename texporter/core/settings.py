from __future__ import annotations

import json
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict

from texporter.config import (
    DEFAULT_OUTPUT_DIR,
    DEFAULT_RENDER_QUEUE_THRESHOLD,
    DEFAULT_TEXTURE_EXTENSION,
    SETTINGS_RELPATH,
    SUMMARY_LIMIT,
)
from texporter.logging_utils import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class ExportSettings:
    output_directory: str = DEFAULT_OUTPUT_DIR  # logical path, forward slashes
    render_queue_threshold: int = DEFAULT_RENDER_QUEUE_THRESHOLD
    texture_extension: str = DEFAULT_TEXTURE_EXTENSION  # with leading dot
    summary_limit: int = SUMMARY_LIMIT


def is_asset_subpath(logical: str) -> bool:
    """True for relative paths strictly inside Assets/ with no parent hops."""
    parts = logical.split("/")
    if len(parts) < 2 or parts[0] != "Assets":
        return False
    return all(p and p not in (".", "..") and ":" not in p for p in parts)


def settings_path(project_root: str) -> Path:
    return Path(project_root).resolve() / SETTINGS_RELPATH


def to_json_dict(settings: ExportSettings) -> Dict[str, Any]:
    return asdict(settings)


def from_json_dict(d: Dict[str, Any]) -> ExportSettings:
    defaults = ExportSettings()

    output_dir = str(d.get("output_directory") or defaults.output_directory).strip()
    output_dir = output_dir.replace("\\", "/").rstrip("/") or defaults.output_directory
    if not is_asset_subpath(output_dir):
        log.warning("Output directory %r is not inside Assets/; using %s", output_dir, defaults.output_directory)
        output_dir = defaults.output_directory

    ext = str(d.get("texture_extension") or defaults.texture_extension).strip()
    if not ext.startswith("."):
        ext = "." + ext

    threshold = d.get("render_queue_threshold", defaults.render_queue_threshold)
    limit = d.get("summary_limit", defaults.summary_limit)

    return ExportSettings(
        output_directory=output_dir,
        render_queue_threshold=int(threshold),
        texture_extension=ext,
        summary_limit=max(1, int(limit)),
    )


def ensure_default_settings_on_disk(project_root: str) -> Path:
    path = settings_path(project_root)
    if not path.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(to_json_dict(ExportSettings()), indent=2), encoding="utf-8")
    return path


def load_settings(project_root: str) -> ExportSettings:
    path = settings_path(project_root)
    d = json.loads(path.read_text(encoding="utf-8"))
    return from_json_dict(d)


def save_settings(project_root: str, settings: ExportSettings) -> Path:
    path = settings_path(project_root)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(to_json_dict(settings), indent=2), encoding="utf-8")
    return path
