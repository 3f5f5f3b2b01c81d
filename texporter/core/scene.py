from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


class SceneFormatError(ValueError):
    """Raised when a scene snapshot cannot be parsed."""


@dataclass(eq=False)
class SceneObject:
    name: str
    active_in_hierarchy: bool = True
    alive: bool = True  # False once the host has destroyed the object


@dataclass(frozen=True)
class Texture:
    name: str
    path: str  # logical asset path, e.g. "Assets/Art/Wall.png"


@dataclass(eq=False)
class Material:
    name: str
    render_queue: int = 2000
    # slot -> texture; a declared slot may hold None
    textures: Dict[str, Optional[Texture]] = field(default_factory=dict)

    def has_property(self, slot: str) -> bool:
        return slot in self.textures

    def get_texture(self, slot: str) -> Optional[Texture]:
        return self.textures.get(slot)


@dataclass(eq=False)
class Renderer:
    game_object: SceneObject
    enabled: bool = True
    materials: List[Optional[Material]] = field(default_factory=list)  # slot order, may contain None

    @property
    def name(self) -> str:
        return self.game_object.name

    @property
    def is_active(self) -> bool:
        return self.enabled and self.game_object.active_in_hierarchy


@dataclass
class Scene:
    renderers: List[Renderer] = field(default_factory=list)

    def objects(self) -> List[SceneObject]:
        seen: List[SceneObject] = []
        for r in self.renderers:
            if not any(o is r.game_object for o in seen):
                seen.append(r.game_object)
        return seen


def is_live(handle: Any) -> bool:
    """True if ``handle`` still refers to an object the host can select."""
    return handle is not None and bool(getattr(handle, "alive", True))


def _require(d: Dict[str, Any], key: str, where: str) -> Any:
    if key not in d:
        raise SceneFormatError(f"{where}: missing '{key}'")
    return d[key]


def _texture_from_dict(d: Any, where: str) -> Optional[Texture]:
    if d is None:
        return None
    if not isinstance(d, dict):
        raise SceneFormatError(f"{where}: texture must be an object or null")
    path = str(_require(d, "path", where)).replace("\\", "/")
    name = str(d.get("name") or Path(path).stem)
    return Texture(name=name, path=path)


def _material_from_dict(d: Any, where: str) -> Optional[Material]:
    if d is None:
        return None
    if not isinstance(d, dict):
        raise SceneFormatError(f"{where}: material must be an object or null")

    textures_in = d.get("textures") or {}
    if not isinstance(textures_in, dict):
        raise SceneFormatError(f"{where}.textures: expected an object")

    textures = {
        str(slot): _texture_from_dict(tex, f"{where}.textures.{slot}")
        for slot, tex in textures_in.items()
    }

    try:
        render_queue = int(d.get("render_queue", 2000))
    except (TypeError, ValueError):
        raise SceneFormatError(f"{where}.render_queue: expected an integer") from None

    return Material(
        name=str(_require(d, "name", where)),
        render_queue=render_queue,
        textures=textures,
    )


def scene_from_dict(d: Dict[str, Any]) -> Scene:
    renderers_in = d.get("renderers")
    if not isinstance(renderers_in, list):
        raise SceneFormatError("renderers: expected a list")

    renderers: List[Renderer] = []
    for idx, r in enumerate(renderers_in):
        where = f"renderers[{idx}]"
        if not isinstance(r, dict):
            raise SceneFormatError(f"{where}: expected an object")

        materials_in = r.get("materials") or []
        if not isinstance(materials_in, list):
            raise SceneFormatError(f"{where}.materials: expected a list")

        obj = SceneObject(
            name=str(_require(r, "name", where)),
            active_in_hierarchy=bool(r.get("active", True)),
        )
        renderers.append(
            Renderer(
                game_object=obj,
                enabled=bool(r.get("enabled", True)),
                materials=[
                    _material_from_dict(m, f"{where}.materials[{i}]")
                    for i, m in enumerate(materials_in)
                ],
            )
        )

    return Scene(renderers=renderers)


def load_scene(path: str) -> Scene:
    p = Path(path)
    try:
        d = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise SceneFormatError(f"{p.name}: invalid JSON ({e})") from e
    if not isinstance(d, dict):
        raise SceneFormatError(f"{p.name}: top level must be an object")
    return scene_from_dict(d)
