from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class Issue:
    object_name: str
    material_name: str
    message: str
    level: str  # ERROR | WARNING
    code: str   # stable short identifier (e.g. MISSING_BASE_TEXTURE)
    target: Optional[Any] = field(default=None, compare=False, repr=False)  # scene object handle, may go stale

    @property
    def is_error(self) -> bool:
        return self.level.upper() == "ERROR"

    def __str__(self) -> str:
        label = "Error" if self.is_error else "Warning"
        return f"{label} - {self.object_name} ({self.material_name}): {self.message}"


@dataclass(frozen=True)
class ExportStep:
    slot: str    # material property, e.g. "_BaseMap"
    suffix: str  # appended to the base name, e.g. "_BR"


@dataclass(frozen=True)
class ExportedFile:
    src: str
    dst: str
    object_name: str
    material_name: str
    slot: str
