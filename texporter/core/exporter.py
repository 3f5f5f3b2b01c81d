from __future__ import annotations

from texporter.core.classifier import classify, output_filename, passes_visibility_gate
from texporter.core.context import RunContext
from texporter.core.scene import Material, Renderer
from texporter.logging_utils import get_logger
from texporter.models import ExportedFile

log = get_logger(__name__)


def export_material(ctx: RunContext, renderer: Renderer, material: Material) -> bool:
    """
    Gate, classify and export one material.

    Never raises: failures become issues so the batch keeps going.
    Returns False if the material was skipped or failed.
    """
    settings = ctx.settings
    try:
        if not passes_visibility_gate(material, settings.render_queue_threshold):
            ctx.error(
                renderer.name,
                material.name,
                "MISSING_BASE_TEXTURE",
                "Missing base texture on visible material",
                target=renderer.game_object,
            )
            return False

        steps = classify(material.name, available_slots=material.textures.keys())
        for step in steps:
            filename = output_filename(material.name, step.suffix, settings.texture_extension)
            copy_texture(ctx, material, step.slot, filename, renderer.name)
        return True

    except Exception as e:
        log.exception("Failed processing material %s on %s", material.name, renderer.name)
        ctx.error(
            renderer.name,
            material.name,
            "MATERIAL_FAILED",
            str(e) or e.__class__.__name__,
            target=renderer.game_object,
        )
        return False


def copy_texture(ctx: RunContext, material: Material, slot: str, filename: str, object_name: str) -> bool:
    if not material.has_property(slot):
        return False

    texture = material.get_texture(slot)
    if texture is None:
        ctx.warning(object_name, material.name, "TEXTURE_MISSING", f"No texture found for property: {slot}")
        return False

    ext = ctx.settings.texture_extension
    src = ctx.assets.asset_path(texture)
    if not src.endswith(ext):
        fmt = ext.lstrip(".").upper()
        ctx.error(
            object_name,
            material.name,
            "UNSUPPORTED_FORMAT",
            f"Texture {src} is not a {fmt}. Only {fmt} textures are supported.",
        )
        return False

    dst = f"{ctx.settings.output_directory.rstrip('/')}/{filename}"
    if not ctx.assets.copy_asset(src, dst):
        ctx.warning(object_name, material.name, "COPY_FAILED", f"Failed to copy texture from {src} to {dst}")
        return False

    ctx.exported.append(ExportedFile(src=src, dst=dst, object_name=object_name, material_name=material.name, slot=slot))
    log.debug("Copied %s -> %s", src, dst)
    return True
