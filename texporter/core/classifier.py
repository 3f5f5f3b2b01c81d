from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from texporter.config import DEFAULT_RENDER_QUEUE_THRESHOLD, DEFAULT_TEXTURE_EXTENSION
from texporter.core.scene import Material
from texporter.models import ExportStep

BASE_MAP = "_BaseMap"
METALLIC_GLOSS_MAP = "_MetallicGlossMap"
EMISSION_MAP = "_EmissionMap"


@dataclass(frozen=True)
class NamingRule:
    token: str  # case-sensitive substring of the material name
    steps: Tuple[ExportStep, ...]

    def matches(self, material_name: str) -> bool:
        return self.token in material_name


# Order is priority: first match wins.
NAMING_RULES: Tuple[NamingRule, ...] = (
    NamingRule("Metal", (ExportStep(BASE_MAP, "_BR"), ExportStep(METALLIC_GLOSS_MAP, "_MEO"))),
    NamingRule("Transparent", (ExportStep(BASE_MAP, "_BR"), ExportStep(EMISSION_MAP, "_MESA"))),
    NamingRule("Unlit", (ExportStep(BASE_MAP, "_B"),)),
    NamingRule("Blend", (ExportStep(BASE_MAP, "_BA"),)),
    NamingRule("Masked", (ExportStep(BASE_MAP, "_BA"),)),
    NamingRule("UIO", (ExportStep(BASE_MAP, "_BA"),)),
)

# Standard image material
DEFAULT_STEPS: Tuple[ExportStep, ...] = (ExportStep(BASE_MAP, "_BR"),)


def match_rule(material_name: str) -> Optional[NamingRule]:
    for rule in NAMING_RULES:
        if rule.matches(material_name):
            return rule
    return None


def classify(material_name: str, available_slots: Optional[Iterable[str]] = None) -> List[ExportStep]:
    """
    Ordered export steps for a material name.

    If ``available_slots`` is given, steps whose slot the material does not
    declare are dropped.
    """
    rule = match_rule(material_name)
    steps = list(rule.steps) if rule else list(DEFAULT_STEPS)

    if available_slots is not None:
        allowed = set(available_slots)
        steps = [s for s in steps if s.slot in allowed]
    return steps


def base_name(material_name: str) -> str:
    return material_name.split("_", 1)[0]


def output_filename(material_name: str, suffix: str, extension: str = DEFAULT_TEXTURE_EXTENSION) -> str:
    return base_name(material_name) + suffix + extension


def is_opaque(material: Material, threshold: int = DEFAULT_RENDER_QUEUE_THRESHOLD) -> bool:
    return material.render_queue < threshold


def passes_visibility_gate(material: Material, threshold: int = DEFAULT_RENDER_QUEUE_THRESHOLD) -> bool:
    # Transparent / effect materials may legitimately lack a base texture.
    if not is_opaque(material, threshold):
        return True
    return material.has_property(BASE_MAP) and material.get_texture(BASE_MAP) is not None
