import tempfile
import unittest
from pathlib import Path
from unittest import mock

from texporter.core.assets import FileAssetIndex
from texporter.core.context import RunContext
from texporter.core.exporter import copy_texture, export_material
from texporter.core.scene import Material, Renderer, SceneObject, Texture
from texporter.core.settings import ExportSettings

OUT = "Assets/textures/meta-horizon"


class TestExporter(unittest.TestCase):
    def setUp(self):
        self._td = tempfile.TemporaryDirectory()
        self.root = Path(self._td.name)
        (self.root / "Assets" / "Art").mkdir(parents=True)
        (self.root / OUT).mkdir(parents=True)
        self.assets = FileAssetIndex(str(self.root))
        self.ctx = RunContext(settings=ExportSettings(), assets=self.assets)
        self.renderer = Renderer(SceneObject("Wall"))

    def tearDown(self):
        self._td.cleanup()

    def _texture(self, filename, data=b"png"):
        (self.root / "Assets" / "Art" / filename).write_bytes(data)
        return Texture(Path(filename).stem, f"Assets/Art/{filename}")

    def _out(self, filename):
        return self.root / OUT / filename

    def test_metal_material_exports_both_slots(self):
        mat = Material(
            "Wall_Metal_01",
            2000,
            {"_BaseMap": self._texture("albedo.png", b"A"), "_MetallicGlossMap": self._texture("meo.png", b"M")},
        )

        self.assertTrue(export_material(self.ctx, self.renderer, mat))

        self.assertEqual(self._out("Wall_BR.png").read_bytes(), b"A")
        self.assertEqual(self._out("Wall_MEO.png").read_bytes(), b"M")
        self.assertEqual(self.ctx.issues, [])
        self.assertEqual([f.dst for f in self.ctx.exported], [f"{OUT}/Wall_BR.png", f"{OUT}/Wall_MEO.png"])

    def test_gate_blocks_opaque_material_without_base(self):
        mat = Material("Floor", 2999, {"_BaseMap": None})

        self.assertFalse(export_material(self.ctx, self.renderer, mat))

        self.assertEqual(len(self.ctx.issues), 1)
        issue = self.ctx.issues[0]
        self.assertEqual(issue.code, "MISSING_BASE_TEXTURE")
        self.assertTrue(issue.message.startswith("Missing base texture"))
        self.assertIs(issue.target, self.renderer.game_object)
        self.assertEqual(list((self.root / OUT).iterdir()), [])

    def test_gate_bypassed_at_threshold(self):
        mat = Material("Floor", 3000, {"_BaseMap": None})

        self.assertTrue(export_material(self.ctx, self.renderer, mat))

        codes = [i.code for i in self.ctx.issues]
        self.assertNotIn("MISSING_BASE_TEXTURE", codes)
        # export was attempted and found the slot empty
        self.assertEqual(codes, ["TEXTURE_MISSING"])
        self.assertEqual(self.ctx.issues[0].level, "WARNING")

    def test_non_png_source_is_rejected(self):
        mat = Material("Rock", 2000, {"_BaseMap": self._texture("rock.tga")})

        export_material(self.ctx, self.renderer, mat)

        self.assertEqual(len(self.ctx.issues), 1)
        self.assertEqual(self.ctx.issues[0].code, "UNSUPPORTED_FORMAT")
        self.assertEqual(self.ctx.issues[0].level, "ERROR")
        self.assertFalse(self._out("Rock_BR.png").exists())
        self.assertIn("is not a PNG", self.ctx.issues[0].message)

    def test_format_message_follows_configured_extension(self):
        self.ctx = RunContext(settings=ExportSettings(texture_extension=".tga"), assets=self.assets)
        mat = Material("Rock", 2000, {"_BaseMap": self._texture("rock.png")})

        export_material(self.ctx, self.renderer, mat)

        self.assertEqual([i.code for i in self.ctx.issues], ["UNSUPPORTED_FORMAT"])
        self.assertIn("is not a TGA. Only TGA textures", self.ctx.issues[0].message)
        self.assertFalse(self._out("Rock_BR.tga").exists())

    def test_undeclared_slot_is_skipped_silently(self):
        mat = Material("Door_Metal", 2000, {"_BaseMap": self._texture("door.png")})

        export_material(self.ctx, self.renderer, mat)

        self.assertEqual(self.ctx.issues, [])
        self.assertTrue(self._out("Door_BR.png").exists())
        self.assertFalse(self._out("Door_MEO.png").exists())

    def test_copy_failure_is_warning(self):
        mat = Material("Lost", 2000, {"_BaseMap": Texture("gone", "Assets/Art/gone.png")})

        self.assertFalse(copy_texture(self.ctx, mat, "_BaseMap", "Lost_BR.png", "Wall"))

        self.assertEqual(len(self.ctx.issues), 1)
        self.assertEqual(self.ctx.issues[0].code, "COPY_FAILED")
        self.assertEqual(self.ctx.issues[0].level, "WARNING")
        self.assertIn("Failed to copy texture from Assets/Art/gone.png", self.ctx.issues[0].message)

    def test_existing_output_is_overwritten(self):
        self._out("Tile_BR.png").write_bytes(b"old")
        mat = Material("Tile", 2000, {"_BaseMap": self._texture("tile.png", b"new")})

        export_material(self.ctx, self.renderer, mat)

        self.assertEqual(self._out("Tile_BR.png").read_bytes(), b"new")

    def test_unexpected_failure_becomes_error_issue(self):
        mat = Material("Tile", 2000, {"_BaseMap": self._texture("tile.png")})

        with mock.patch.object(self.assets, "asset_path", side_effect=RuntimeError("asset index offline")):
            self.assertFalse(export_material(self.ctx, self.renderer, mat))

        self.assertEqual(len(self.ctx.issues), 1)
        issue = self.ctx.issues[0]
        self.assertEqual(issue.code, "MATERIAL_FAILED")
        self.assertEqual(issue.message, "asset index offline")
        self.assertIs(issue.target, self.renderer.game_object)


if __name__ == "__main__":
    unittest.main()
