from __future__ import annotations

import shutil
from pathlib import Path
from typing import List, Set

from texporter.core.scene import Texture
from texporter.logging_utils import get_logger

log = get_logger(__name__)


def _norm(logical: str) -> str:
    return logical.replace("\\", "/").strip("/")


class FileAssetIndex:
    """
    Asset index over a project folder on disk.

    Assets are addressed by logical, forward-slash paths relative to the
    project root (e.g. "Assets/textures/meta-horizon/Wall_BR.png").
    """

    def __init__(self, project_root: str):
        self.project_root = Path(project_root).resolve()
        self.refresh_count = 0
        self._known: Set[str] = set()

    def to_abs(self, logical: str) -> Path:
        return self.project_root / _norm(logical)

    def is_under_assets(self, logical: str) -> bool:
        """True if ``logical`` resolves to a location strictly below <project>/Assets."""
        assets_root = (self.project_root / "Assets").resolve()
        target = self.to_abs(logical).resolve()
        return assets_root in target.parents

    def asset_path(self, texture: Texture) -> str:
        return _norm(texture.path)

    def directory_exists(self, logical: str) -> bool:
        return self.to_abs(logical).is_dir()

    def list_files(self, logical: str) -> List[str]:
        """Files directly inside ``logical`` (non-recursive), as logical paths."""
        folder = self.to_abs(logical)
        if not folder.is_dir():
            return []
        return sorted(f"{_norm(logical)}/{p.name}" for p in folder.iterdir() if p.is_file())

    def create_directory(self, logical: str) -> None:
        self.to_abs(logical).mkdir(parents=True, exist_ok=True)

    def copy_asset(self, src: str, dst: str) -> bool:
        src_path = self.to_abs(src)
        dst_path = self.to_abs(dst)

        if not src_path.is_file():
            log.warning("Copy source missing: %s", src)
            return False

        try:
            dst_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(src_path, dst_path)
        except OSError as e:
            log.warning("Copy failed: %s -> %s (%s)", src, dst, e)
            return False
        self._known.add(_norm(dst))
        return True

    def delete_asset(self, logical: str) -> bool:
        try:
            self.to_abs(logical).unlink()
        except FileNotFoundError:
            return False
        self._known.discard(_norm(logical))
        return True

    def refresh(self) -> int:
        """Re-index every file under Assets/. Returns the number of known assets."""
        assets_root = self.project_root / "Assets"
        known: Set[str] = set()
        if assets_root.is_dir():
            for p in assets_root.rglob("*"):
                if p.is_file():
                    known.add(str(p.relative_to(self.project_root)).replace("\\", "/"))
        self._known = known
        self.refresh_count += 1
        log.debug("Asset index refreshed: %d asset(s)", len(known))
        return len(known)

    def contains(self, logical: str) -> bool:
        return _norm(logical) in self._known
