from __future__ import annotations

import sys

from PySide6.QtWidgets import QApplication

from texporter.logging_utils import configure_root_logger
from texporter.ui.main_window import MainWindow


def main() -> int:
    configure_root_logger()
    app = QApplication.instance() or QApplication(sys.argv)
    window = MainWindow()
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
