from __future__ import annotations

from typing import Iterator, Tuple

from texporter.core.context import RunContext
from texporter.core.scene import Material, Renderer, Scene
from texporter.logging_utils import get_logger

log = get_logger(__name__)

# Progress band owned by the scan; setup steps report below it.
SCAN_PROGRESS_START = 0.3
SCAN_PROGRESS_SPAN = 0.7


def count_active_renderers(scene: Scene) -> int:
    return sum(1 for r in scene.renderers if r.is_active)


def scan_scene(ctx: RunContext, scene: Scene) -> Iterator[Tuple[Renderer, Material]]:
    """
    Yield (renderer, material) pairs in scene order.

    Disabled renderers and renderers on inactive objects are skipped without
    issues. Null material slots emit a warning and are not counted.
    """
    total_active = count_active_renderers(scene)
    log.info("Found %d renderers in the scene (%d active)", len(scene.renderers), total_active)

    for renderer in scene.renderers:
        if not renderer.is_active:
            log.debug("Skipping disabled renderer on: %s", renderer.name)
            continue

        ctx.processed_renderers += 1
        idx = ctx.processed_renderers
        ctx.report_progress(
            SCAN_PROGRESS_START + SCAN_PROGRESS_SPAN * idx / max(total_active, 1),
            f"Processing renderer {idx}/{total_active}: {renderer.name}",
        )
        log.info("Processing renderer %d/%d: %s", idx, total_active, renderer.name)

        for material in renderer.materials:
            if material is None:
                ctx.warning(
                    renderer.name,
                    "null",
                    "NULL_MATERIAL",
                    "Null material reference found",
                    target=renderer.game_object,
                )
                continue

            ctx.total_materials += 1
            yield renderer, material
