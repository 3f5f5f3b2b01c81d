"""
Run-scoped state threaded through the scanner, exporter and reporter.

One ``RunContext`` is created per "Process Materials" run and discarded when
the summary has been shown. Nothing in here outlives the run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from texporter.core.settings import ExportSettings
from texporter.models import ExportedFile, Issue

ProgressCallback = Callable[[float, str], None]


@dataclass
class RunContext:
    settings: ExportSettings
    assets: Any  # FileAssetIndex or any object with the same methods
    progress: Optional[ProgressCallback] = None

    issues: List[Issue] = field(default_factory=list)
    exported: List[ExportedFile] = field(default_factory=list)
    processed_renderers: int = 0
    total_materials: int = 0

    def report_progress(self, fraction: float, message: str) -> None:
        if self.progress:
            self.progress(fraction, message)

    def error(self, object_name: str, material_name: str, code: str, message: str, target: Any = None) -> Issue:
        issue = Issue(object_name, material_name, message, "ERROR", code, target)
        self.issues.append(issue)
        return issue

    def warning(self, object_name: str, material_name: str, code: str, message: str, target: Any = None) -> Issue:
        issue = Issue(object_name, material_name, message, "WARNING", code, target)
        self.issues.append(issue)
        return issue

    @property
    def errors(self) -> List[Issue]:
        return [i for i in self.issues if i.is_error]

    @property
    def warnings(self) -> List[Issue]:
        return [i for i in self.issues if not i.is_error]
