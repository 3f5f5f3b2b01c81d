import json
import tempfile
import unittest
from pathlib import Path

from texporter.core.assets import FileAssetIndex
from texporter.core.scene import SceneFormatError, is_live, load_scene, scene_from_dict


class TestSceneLoading(unittest.TestCase):
    def test_load_scene(self):
        data = {
            "renderers": [
                {
                    "name": "Crate",
                    "materials": [
                        {
                            "name": "Crate_Metal",
                            "render_queue": 2450,
                            "textures": {"_BaseMap": {"path": "Assets\\Art\\crate.png"}, "_EmissionMap": None},
                        },
                        None,
                    ],
                },
                {"name": "Off", "enabled": False, "active": False},
            ]
        }
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "scene.json"
            path.write_text(json.dumps(data), encoding="utf-8")
            scene = load_scene(str(path))

        crate, off = scene.renderers
        self.assertTrue(crate.is_active)
        self.assertFalse(off.is_active)
        self.assertEqual(off.materials, [])

        mat = crate.materials[0]
        self.assertIsNone(crate.materials[1])
        self.assertEqual(mat.render_queue, 2450)
        self.assertTrue(mat.has_property("_EmissionMap"))
        self.assertIsNone(mat.get_texture("_EmissionMap"))
        self.assertFalse(mat.has_property("_MetallicGlossMap"))
        self.assertEqual(mat.get_texture("_BaseMap").path, "Assets/Art/crate.png")
        self.assertEqual(mat.get_texture("_BaseMap").name, "crate")

    def test_format_errors(self):
        with self.assertRaises(SceneFormatError):
            scene_from_dict({})
        with self.assertRaises(SceneFormatError):
            scene_from_dict({"renderers": [{"materials": []}]})
        with self.assertRaises(SceneFormatError) as cm:
            scene_from_dict({"renderers": [{"name": "A", "materials": [{"name": "M", "render_queue": "high"}]}]})
        self.assertIn("renderers[0].materials[0].render_queue", str(cm.exception))

        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "broken.json"
            path.write_text("{not json", encoding="utf-8")
            with self.assertRaises(SceneFormatError):
                load_scene(str(path))

    def test_is_live(self):
        scene = scene_from_dict({"renderers": [{"name": "A"}]})
        obj = scene.renderers[0].game_object
        self.assertTrue(is_live(obj))
        obj.alive = False
        self.assertFalse(is_live(obj))
        self.assertFalse(is_live(None))


class TestFileAssetIndex(unittest.TestCase):
    def test_copy_list_delete_refresh(self):
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            (root / "Assets" / "Art").mkdir(parents=True)
            (root / "Assets" / "Art" / "a.png").write_bytes(b"a")
            assets = FileAssetIndex(td)

            self.assertFalse(assets.directory_exists("Assets/out"))
            self.assertTrue(assets.copy_asset("Assets/Art/a.png", "Assets/out/A_BR.png"))
            self.assertFalse(assets.copy_asset("Assets/Art/missing.png", "Assets/out/B_BR.png"))
            self.assertEqual(assets.list_files("Assets/out"), ["Assets/out/A_BR.png"])

            self.assertEqual(assets.refresh(), 2)
            self.assertTrue(assets.contains("Assets/out/A_BR.png"))

            self.assertTrue(assets.delete_asset("Assets/out/A_BR.png"))
            self.assertFalse(assets.delete_asset("Assets/out/A_BR.png"))
            self.assertEqual(assets.list_files("Assets/out"), [])
            self.assertFalse(assets.contains("Assets/out/A_BR.png"))


if __name__ == "__main__":
    unittest.main()
