import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from PySide6.QtWidgets import QApplication
from PySide6.QtTest import QTest
from PySide6.QtCore import Qt

from texporter.ui.main_window import MainWindow, QtEditorUI


def _make_project(root: Path) -> Path:
    art = root / "Assets" / "Art"
    art.mkdir(parents=True, exist_ok=True)
    (art / "wall.png").write_bytes(b"wall")
    (art / "rock.tga").write_bytes(b"rock")

    scene = {
        "renderers": [
            {
                "name": "Wall",
                "materials": [{"name": "Wall_Metal_01", "render_queue": 2000, "textures": {"_BaseMap": {"path": "Assets/Art/wall.png"}}}],
            },
            {
                "name": "Rock",
                "materials": [{"name": "Rock", "render_queue": 2000, "textures": {}}],
            },
        ]
    }
    scene_path = root / "scene.json"
    scene_path.write_text(json.dumps(scene), encoding="utf-8")
    return scene_path


class TestMainWindowUI(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        # Ensure one QApplication exists
        cls.app = QApplication.instance() or QApplication([])

    def setUp(self):
        self.window = MainWindow()
        self.window.show()
        QTest.qWaitForWindowExposed(self.window)

    def tearDown(self):
        self.window.close()

    def test_process_exports_and_selects_first_error(self):
        with tempfile.TemporaryDirectory() as project_dir:
            root = Path(project_dir)
            scene_path = _make_project(root)

            self.window.project_edit.setText(str(root))
            self.window.scene_edit.setText(str(scene_path))

            with mock.patch.object(QtEditorUI, "show_summary", return_value=True) as summary:
                btn = self.window.findChild(type(self.window.btn_process), "btn_process")
                QTest.mouseClick(btn, Qt.LeftButton)

            summary.assert_called_once()
            self.assertTrue((root / "Assets" / "textures" / "meta-horizon" / "Wall_BR.png").exists())

            results = self.window.findChild(type(self.window.results_list), "results_list")
            texts = [results.item(i).text() for i in range(results.count())]
            self.assertTrue(any("MISSING_BASE_TEXTURE" in t for t in texts))

            current = self.window.objects_list.currentItem()
            self.assertIsNotNone(current)
            self.assertEqual(current.text(), "Rock")

            log_box = self.window.findChild(type(self.window.log_box), "log_box")
            self.assertIn("PROCESS DONE", log_box.toPlainText())
            self.assertTrue(self.window.btn_export.isEnabled())

    def test_declined_clear_leaves_output(self):
        with tempfile.TemporaryDirectory() as project_dir:
            root = Path(project_dir)
            scene_path = _make_project(root)
            out = root / "Assets" / "textures" / "meta-horizon"
            out.mkdir(parents=True)
            (out / "keep.png").write_bytes(b"keep")

            self.window.project_edit.setText(str(root))
            self.window.scene_edit.setText(str(scene_path))

            with mock.patch.object(QtEditorUI, "confirm_clear", return_value=False) as confirm:
                self.window.action_process.trigger()

            confirm.assert_called_once()
            self.assertEqual(sorted(p.name for p in out.iterdir()), ["keep.png"])
            self.assertFalse(self.window.btn_export.isEnabled())


if __name__ == "__main__":
    unittest.main()
