from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from texporter.core.context import RunContext
from texporter.core.exporter import export_material
from texporter.core.reporting import build_summary_text, first_selectable_error
from texporter.core.scanner import scan_scene
from texporter.core.scene import Scene
from texporter.core.settings import ExportSettings
from texporter.logging_utils import get_logger

log = get_logger(__name__)

SUMMARY_TITLE = "Material Processing Completed with Issues"


class RunState(str, Enum):
    IDLE = "idle"
    PREPARING = "preparing"
    SCANNING = "scanning"
    PROCESSING = "processing"
    FINALIZING = "finalizing"
    DONE = "done"
    CANCELLED = "cancelled"
    FAILED = "failed"


class EditorUI:
    """
    Host-side dialogs and progress reporting.

    The defaults are headless: the clear prompt is declined, the summary is
    not acted on, progress is dropped. The Qt window overrides all of them.
    """

    def progress(self, fraction: float, message: str) -> None:
        pass

    def clear_progress(self) -> None:
        pass

    def confirm_clear(self, output_directory: str) -> bool:
        return False

    def show_summary(self, title: str, message: str, has_errors: bool) -> bool:
        """Return True if the user asked to select the first error."""
        return False

    def select_object(self, target: Any) -> None:
        pass

    def show_fatal(self, message: str) -> None:
        pass


@dataclass
class RunResult:
    context: RunContext
    state: RunState = RunState.IDLE
    error: Optional[str] = None

    @property
    def issues(self):
        return self.context.issues


def _prepare_output(ctx: RunContext, ui: EditorUI) -> bool:
    """Clear or create the output directory. Returns False if the user cancelled."""
    assets = ctx.assets
    out_dir = ctx.settings.output_directory

    if not assets.is_under_assets(out_dir):
        raise ValueError(f"Output directory must be inside Assets/: {out_dir}")

    existing = assets.list_files(out_dir) if assets.directory_exists(out_dir) else []
    # symlinked entries may point outside the project
    existing = [p for p in existing if assets.is_under_assets(p)]
    if existing:
        log.info("Found existing files in %s", out_dir)
        ui.clear_progress()
        if not ui.confirm_clear(out_dir):
            log.info("Material processing cancelled.")
            return False

        ui.progress(0.1, "Clearing output directory...")
        log.info("Deleting %d existing files...", len(existing))
        for path in existing:
            assets.delete_asset(path)
        assets.refresh()
        log.info("Directory cleared successfully.")

    if not assets.directory_exists(out_dir):
        ui.progress(0.2, "Creating output directory...")
        log.info("Creating output directory: %s", out_dir)
        assets.create_directory(out_dir)
        assets.refresh()

    return True


def _present_summary(ctx: RunContext, ui: EditorUI) -> None:
    if not ctx.issues:
        return

    message = build_summary_text(ctx.issues, limit=ctx.settings.summary_limit)
    has_errors = bool(ctx.errors)
    wants_select = ui.show_summary(SUMMARY_TITLE, message, has_errors)

    if wants_select and has_errors:
        first = first_selectable_error(ctx.issues)
        if first is not None:
            ui.select_object(first.target)
        else:
            log.info("First error has no selectable object; nothing to highlight.")


def process_materials(
    scene: Scene,
    assets: Any,
    ui: Optional[EditorUI] = None,
    settings: Optional[ExportSettings] = None,
) -> RunResult:
    """
    Export every texture referenced by the scene's active renderers.

    Per-material failures are recorded as issues; anything else aborts the
    run with state FAILED and a fatal dialog.
    """
    ui = ui or EditorUI()
    settings = settings or ExportSettings()
    ctx = RunContext(settings=settings, assets=assets, progress=ui.progress)
    result = RunResult(context=ctx)

    try:
        result.state = RunState.PREPARING
        ui.progress(0.0, "Starting material processing...")
        log.info("Starting material processing...")

        if not _prepare_output(ctx, ui):
            result.state = RunState.CANCELLED
            return result

        result.state = RunState.SCANNING
        ui.progress(0.3, "Finding renderers in scene...")
        pairs = scan_scene(ctx, scene)

        result.state = RunState.PROCESSING
        for renderer, material in pairs:
            export_material(ctx, renderer, material)

        result.state = RunState.FINALIZING
        ui.progress(0.95, "Finalizing...")
        assets.refresh()
        ui.clear_progress()

        _present_summary(ctx, ui)

        log.info(
            "Material processing completed. Processed %d active renderers with %d materials. Found %d issues.",
            ctx.processed_renderers,
            ctx.total_materials,
            len(ctx.issues),
        )
        result.state = RunState.DONE

    except Exception as e:
        log.exception("Error processing materials")
        ui.clear_progress()
        result.state = RunState.FAILED
        result.error = str(e)
        ui.show_fatal(f"A critical error occurred while processing materials:\n{e}")

    return result
