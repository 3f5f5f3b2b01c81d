import logging
import os
from pathlib import Path

from PySide6.QtCore import Qt, QObject, Signal
from PySide6.QtGui import QAction
from PySide6.QtWidgets import (
    QApplication,
    QMainWindow,
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QFileDialog,
    QListWidget,
    QListWidgetItem,
    QPlainTextEdit,
    QSplitter,
    QMessageBox,
    QProgressBar,
    QSpinBox,
)

from texporter.config import APP_NAME, APP_VERSION
from texporter.core.assets import FileAssetIndex
from texporter.core.pipeline import EditorUI, RunState, process_materials
from texporter.core.reporting import build_report_html, write_report_html
from texporter.core.scene import SceneFormatError, load_scene
from texporter.core.settings import (
    ExportSettings,
    ensure_default_settings_on_disk,
    from_json_dict,
    load_settings,
    save_settings,
)
from texporter.logging_utils import DATE_FORMAT, get_logger

log = get_logger(__name__)


class _LogEmitter(QObject):
    message = Signal(str)


class QtLogHandler(logging.Handler):
    """Mirrors log records into the window's log box."""

    def __init__(self, sink):
        super().__init__(level=logging.INFO)
        self._emitter = _LogEmitter()
        self._emitter.message.connect(sink)
        self.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s", datefmt=DATE_FORMAT))

    def emit(self, record):
        try:
            self._emitter.message.emit(self.format(record))
        except RuntimeError:
            # window already destroyed
            pass


class QtEditorUI(EditorUI):
    """Dialogs and progress for a run, backed by the main window."""

    def __init__(self, window):
        self.window = window

    def progress(self, fraction, message):
        self.window.progress.setValue(int(max(0.0, min(fraction, 1.0)) * 100))
        self.window.progress_label.setText(message)
        QApplication.processEvents()

    def clear_progress(self):
        self.window.progress.setValue(0)
        self.window.progress_label.setText("")

    def confirm_clear(self, output_directory):
        box = QMessageBox(self.window)
        box.setWindowTitle("Clear Output Directory")
        box.setText(f"This will clear all files in {output_directory}. Are you sure you want to proceed?")
        yes = box.addButton("Yes, Clear and Process", QMessageBox.AcceptRole)
        box.addButton("Cancel", QMessageBox.RejectRole)
        box.exec()
        return box.clickedButton() is yes

    def show_summary(self, title, message, has_errors):
        box = QMessageBox(self.window)
        box.setWindowTitle(title)
        box.setText(message)
        box.setIcon(QMessageBox.Warning if has_errors else QMessageBox.Information)
        select = box.addButton("Select Error", QMessageBox.AcceptRole)
        box.addButton("Close" if has_errors else "OK", QMessageBox.RejectRole)
        box.exec()
        return box.clickedButton() is select

    def select_object(self, target):
        self.window.highlight_object(target)

    def show_fatal(self, message):
        QMessageBox.critical(self.window, "Error Processing Materials", message)


class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle(f"{APP_NAME} (v{APP_VERSION})")
        self.setMinimumSize(1020, 680)

        # State
        self._last_result = None
        self._last_scene = None
        self._settings = ExportSettings()

        # --- Root widget
        root = QWidget()
        self.setCentralWidget(root)

        main_layout = QVBoxLayout(root)
        main_layout.setContentsMargins(12, 12, 12, 12)
        main_layout.setSpacing(10)

        # -------------------------
        # Menu: Tools > Process Materials
        # -------------------------
        tools_menu = self.menuBar().addMenu("Tools")
        self.action_process = QAction("Process Materials", self)
        self.action_process.triggered.connect(self.on_process_clicked)
        tools_menu.addAction(self.action_process)

        # -------------------------
        # Top: Project / Scene rows
        # -------------------------
        self.project_edit = QLineEdit()
        self.project_edit.setPlaceholderText("Select project root (folder containing Assets/)...")

        btn_project = QPushButton("Browse...")
        btn_project.clicked.connect(self.pick_project_folder)

        project_row = QHBoxLayout()
        project_row.addWidget(QLabel("Project:"))
        project_row.addWidget(self.project_edit, 1)
        project_row.addWidget(btn_project)

        self.scene_edit = QLineEdit()
        self.scene_edit.setPlaceholderText("Select scene snapshot (.json)...")

        btn_scene = QPushButton("Browse...")
        btn_scene.clicked.connect(self.pick_scene_file)

        scene_row = QHBoxLayout()
        scene_row.addWidget(QLabel("Scene:"))
        scene_row.addWidget(self.scene_edit, 1)
        scene_row.addWidget(btn_scene)

        main_layout.addLayout(project_row)
        main_layout.addLayout(scene_row)

        # -------------------------
        # Settings editor
        # -------------------------
        settings_row = QHBoxLayout()

        self.output_dir_edit = QLineEdit()
        self.output_dir_edit.setText(self._settings.output_directory)

        self.threshold_spin = QSpinBox()
        self.threshold_spin.setRange(0, 5000)
        self.threshold_spin.setValue(self._settings.render_queue_threshold)

        self.btn_settings_reload = QPushButton("Reload Settings")
        self.btn_settings_reload.clicked.connect(self.on_reload_settings_clicked)

        self.btn_settings_save = QPushButton("Save Settings")
        self.btn_settings_save.clicked.connect(self.on_save_settings_clicked)

        settings_row.addWidget(QLabel("Output:"))
        settings_row.addWidget(self.output_dir_edit, 1)
        settings_row.addWidget(QLabel("Opaque below render queue:"))
        settings_row.addWidget(self.threshold_spin)
        settings_row.addWidget(self.btn_settings_reload)
        settings_row.addWidget(self.btn_settings_save)

        main_layout.addLayout(settings_row)

        # -------------------------
        # Actions
        # -------------------------
        action_row = QHBoxLayout()
        action_row.addStretch(1)

        self.btn_process = QPushButton("Process Materials")
        self.btn_process.clicked.connect(self.on_process_clicked)

        self.btn_export = QPushButton("Export Report")
        self.btn_export.setEnabled(False)  # enabled after a finished run
        self.btn_export.clicked.connect(self.on_export_report_clicked)

        action_row.addWidget(self.btn_process)
        action_row.addWidget(self.btn_export)
        main_layout.addLayout(action_row)

        # -------------------------
        # Progress
        # -------------------------
        prog_row = QHBoxLayout()

        self.progress = QProgressBar()
        self.progress.setRange(0, 100)
        self.progress.setValue(0)

        self.progress_label = QLabel("")

        prog_row.addWidget(QLabel("Progress:"))
        prog_row.addWidget(self.progress, 1)
        prog_row.addWidget(self.progress_label, 1)

        main_layout.addLayout(prog_row)

        # -------------------------
        # Bottom: Results / Scene objects / Log
        # -------------------------
        splitter = QSplitter(Qt.Horizontal)

        results_panel = QWidget()
        results_layout = QVBoxLayout(results_panel)
        results_layout.setContentsMargins(0, 0, 0, 0)
        results_layout.addWidget(QLabel("Results"))
        self.results_list = QListWidget()
        results_layout.addWidget(self.results_list, 1)

        objects_panel = QWidget()
        objects_layout = QVBoxLayout(objects_panel)
        objects_layout.setContentsMargins(0, 0, 0, 0)
        objects_layout.addWidget(QLabel("Scene Objects"))
        self.objects_list = QListWidget()
        objects_layout.addWidget(self.objects_list, 1)

        logs_panel = QWidget()
        logs_layout = QVBoxLayout(logs_panel)
        logs_layout.setContentsMargins(0, 0, 0, 0)
        logs_layout.addWidget(QLabel("Log"))
        self.log_box = QPlainTextEdit()
        self.log_box.setReadOnly(True)
        self.log_box.setPlaceholderText("Logs will appear here...")
        logs_layout.addWidget(self.log_box, 1)

        splitter.addWidget(results_panel)
        splitter.addWidget(objects_panel)
        splitter.addWidget(logs_panel)
        splitter.setSizes([460, 200, 360])

        main_layout.addWidget(splitter, 1)

        # Stable IDs (used by UI tests)
        self.project_edit.setObjectName("project_edit")
        self.scene_edit.setObjectName("scene_edit")
        self.output_dir_edit.setObjectName("output_dir_edit")
        self.threshold_spin.setObjectName("threshold_spin")
        self.btn_process.setObjectName("btn_process")
        self.btn_export.setObjectName("btn_export")
        self.results_list.setObjectName("results_list")
        self.objects_list.setObjectName("objects_list")
        self.log_box.setObjectName("log_box")
        self.progress.setObjectName("progress")
        self.action_process.setObjectName("action_process")

        self._log_handler = QtLogHandler(self.log)
        logging.getLogger("texporter").addHandler(self._log_handler)

        self.log("Ready. Choose a project and scene, then Tools > Process Materials.")

    def closeEvent(self, event):
        logging.getLogger("texporter").removeHandler(self._log_handler)
        super().closeEvent(event)

    # -------------------------
    # UI Helpers
    # -------------------------
    def log(self, msg: str):
        self.log_box.appendPlainText(msg)

    def add_result(self, level: str, message: str):
        item = QListWidgetItem(f"[{level}] {message}")

        lvl = level.upper().strip()
        if lvl == "ERROR":
            item.setForeground(Qt.red)
        elif lvl == "WARNING":
            item.setForeground(Qt.darkYellow)
        else:
            item.setForeground(Qt.darkGreen)

        self.results_list.addItem(item)

    def pick_project_folder(self):
        folder = QFileDialog.getExistingDirectory(self, "Select Project Root")
        if folder:
            self.project_edit.setText(os.path.normpath(folder))
            self.log(f"Project root set: {folder}")
            self.on_reload_settings_clicked()

    def pick_scene_file(self):
        path, _ = QFileDialog.getOpenFileName(self, "Select Scene Snapshot", "", "Scene (*.json)")
        if path:
            self.scene_edit.setText(os.path.normpath(path))
            self.log(f"Scene set: {path}")

    def _require_paths(self):
        project_root = self.project_edit.text().strip()
        scene_path = self.scene_edit.text().strip()

        if not project_root or not os.path.isdir(project_root):
            QMessageBox.warning(self, "Missing Project", "Please choose a valid project root.")
            return None, None

        if not scene_path or not os.path.isfile(scene_path):
            QMessageBox.warning(self, "Missing Scene", "Please choose a scene snapshot file.")
            return None, None

        return project_root, scene_path

    def _populate_objects(self, scene):
        self.objects_list.clear()
        for obj in scene.objects():
            label = obj.name if obj.active_in_hierarchy else f"{obj.name} (inactive)"
            item = QListWidgetItem(label)
            item.setData(Qt.UserRole, obj)
            self.objects_list.addItem(item)

    def highlight_object(self, target):
        for row in range(self.objects_list.count()):
            item = self.objects_list.item(row)
            if item.data(Qt.UserRole) is target:
                self.objects_list.setCurrentItem(item)
                self.objects_list.scrollToItem(item)
                self.log(f"Selected: {target.name}")
                return
        self.log("First error's object is no longer in the scene.")

    # -------------------------
    # Settings
    # -------------------------
    def _read_settings_from_editor(self) -> ExportSettings:
        return from_json_dict(
            {
                "output_directory": self.output_dir_edit.text(),
                "render_queue_threshold": self.threshold_spin.value(),
                "texture_extension": self._settings.texture_extension,
                "summary_limit": self._settings.summary_limit,
            }
        )

    def _apply_settings_to_editor(self, settings: ExportSettings):
        self._settings = settings
        self.output_dir_edit.setText(settings.output_directory)
        self.threshold_spin.setValue(settings.render_queue_threshold)

    def on_reload_settings_clicked(self):
        project_root = self.project_edit.text().strip()
        if not project_root or not os.path.isdir(project_root):
            return
        try:
            ensure_default_settings_on_disk(project_root)
            settings = load_settings(project_root)
        except (OSError, ValueError) as e:
            self.log(f"Settings could not be loaded ({e}); using defaults.")
            settings = ExportSettings()
        self._apply_settings_to_editor(settings)
        self.log(f"Settings loaded: output={settings.output_directory}")

    def on_save_settings_clicked(self):
        project_root = self.project_edit.text().strip()
        if not project_root or not os.path.isdir(project_root):
            QMessageBox.warning(self, "Missing Project", "Please choose a valid project root.")
            return
        settings = self._read_settings_from_editor()
        try:
            path = save_settings(project_root, settings)
        except OSError as e:
            QMessageBox.critical(self, "Save Failed", str(e))
            return
        self._settings = settings
        self.add_result("INFO", f"Settings saved: {path}")
        self.log(f"Settings saved: {path}")

    # -------------------------
    # Process Materials
    # -------------------------
    def on_process_clicked(self):
        self.results_list.clear()
        self.btn_export.setEnabled(False)

        project_root, scene_path = self._require_paths()
        if not project_root:
            return

        try:
            scene = load_scene(scene_path)
        except (OSError, SceneFormatError) as e:
            self.add_result("ERROR", f"SCENE_INVALID: {e}")
            self.log(f"ERROR: {e}")
            return

        self._last_scene = scene
        self._populate_objects(scene)
        settings = self._read_settings_from_editor()

        self.log("---- PROCESS START ----")
        self.btn_process.setEnabled(False)
        self.action_process.setEnabled(False)
        try:
            result = process_materials(
                scene,
                FileAssetIndex(project_root),
                ui=QtEditorUI(self),
                settings=settings,
            )
        finally:
            self.btn_process.setEnabled(True)
            self.action_process.setEnabled(True)

        self._last_result = result
        ctx = result.context

        if result.state == RunState.CANCELLED:
            self.add_result("WARNING", "Processing cancelled; output directory left untouched.")
            self.log("---- PROCESS CANCELLED ----")
            return

        if result.state == RunState.FAILED:
            self.add_result("ERROR", f"PROCESS_FAILED: {result.error}")
            self.log("---- PROCESS FAILED ----")
            return

        self.add_result(
            "INFO",
            f"Processed {ctx.processed_renderers} renderer(s), {ctx.total_materials} material(s); "
            f"exported {len(ctx.exported)} texture(s).",
        )
        self.add_result("INFO", f"Issues: {len(ctx.errors)} error(s), {len(ctx.warnings)} warning(s)")

        for issue in ctx.errors + ctx.warnings:
            self.add_result(issue.level, f"{issue.code}: {issue}")

        self.btn_export.setEnabled(True)
        self.log("---- PROCESS DONE ----")

    def on_export_report_clicked(self):
        if not self._last_result:
            QMessageBox.information(self, "Nothing to Export", "Run Process Materials first.")
            return

        path, _ = QFileDialog.getSaveFileName(self, "Save Report", "texporter_report.html", "HTML (*.html)")
        if not path:
            return

        ctx = self._last_result.context
        html_text = build_report_html(
            tool_name=APP_NAME,
            tool_version=APP_VERSION,
            project_root=self.project_edit.text().strip(),
            settings=ctx.settings,
            issues=ctx.issues,
            exported=ctx.exported,
            processed_renderers=ctx.processed_renderers,
            total_materials=ctx.total_materials,
        )
        try:
            written = write_report_html(html_text, path)
        except OSError as e:
            self.add_result("ERROR", f"EXPORT_FAILED: {e}")
            QMessageBox.critical(self, "Export Failed", f"Export failed:\n{e}")
            return

        self.add_result("INFO", f"Report written: {written}")
        self.log(f"Report exported: {Path(written).resolve()}")
