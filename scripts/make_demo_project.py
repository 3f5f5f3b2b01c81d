from __future__ import annotations

import json
from pathlib import Path

# Placeholder payload; only the .png extension matters to the exporter
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d49484452000000010000000108060000001f15c489"
    "0000000d49444154789c6360000002000001e221bc330000000049454e44ae426082"
)


def main():
    root = Path("demo_project")
    art = root / "Assets" / "Art"
    art.mkdir(parents=True, exist_ok=True)

    for name in ("Crate_albedo", "Crate_meo", "Glass_albedo", "Glass_emission", "Sign_albedo"):
        (art / f"{name}.png").write_bytes(PNG_BYTES)
    (art / "Rock_albedo.tga").write_bytes(b"dummy_tga")

    def tex(name, ext="png"):
        return {"name": name, "path": f"Assets/Art/{name}.{ext}"}

    scene = {
        "renderers": [
            {
                "name": "Crate",
                "materials": [
                    {
                        "name": "Crate_Metal",
                        "render_queue": 2000,
                        "textures": {"_BaseMap": tex("Crate_albedo"), "_MetallicGlossMap": tex("Crate_meo")},
                    },
                    None,
                ],
            },
            {
                "name": "Window",
                "materials": [
                    {
                        "name": "Glass_Transparent",
                        "render_queue": 3000,
                        "textures": {"_BaseMap": tex("Glass_albedo"), "_EmissionMap": tex("Glass_emission")},
                    }
                ],
            },
            {
                "name": "Sign",
                "materials": [{"name": "Sign_Unlit", "render_queue": 2000, "textures": {"_BaseMap": tex("Sign_albedo")}}],
            },
            {
                "name": "Rock",
                "materials": [{"name": "Rock", "render_queue": 2000, "textures": {"_BaseMap": tex("Rock_albedo", "tga")}}],
            },
            {
                "name": "Ghost",
                "materials": [{"name": "Ghost_Metal", "render_queue": 2000, "textures": {"_BaseMap": None}}],
            },
            {
                "name": "HiddenProp",
                "enabled": False,
                "materials": [{"name": "Hidden", "render_queue": 2000, "textures": {}}],
            },
        ]
    }
    (root / "scene.json").write_text(json.dumps(scene, indent=2), encoding="utf-8")

    print(f"Created demo project at: {root.resolve()}")


if __name__ == "__main__":
    main()
