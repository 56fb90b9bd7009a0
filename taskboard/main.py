from __future__ import annotations

import sys
from pathlib import Path

from PySide6.QtGui import QColor, QFont, QPalette
from PySide6.QtWidgets import QApplication, QMessageBox, QStyleFactory

from taskboard.client.rpc_client import TaskRpcClient
from taskboard.config import PROJECT_ROOT, load_settings
from taskboard.domain.errors import TaskboardError
from taskboard.infra.logging import setup_logging
from taskboard.ui.main_window import MainWindow


def _apply_dark_palette(app: QApplication) -> None:
    palette = QPalette()
    palette.setColor(QPalette.Window, QColor("#0F172A"))
    palette.setColor(QPalette.WindowText, QColor("#E6EDF3"))
    palette.setColor(QPalette.Base, QColor("#111827"))
    palette.setColor(QPalette.AlternateBase, QColor("#1B2230"))
    palette.setColor(QPalette.Text, QColor("#E6EDF3"))
    palette.setColor(QPalette.Button, QColor("#202A3B"))
    palette.setColor(QPalette.ButtonText, QColor("#E6EDF3"))
    palette.setColor(QPalette.ToolTipBase, QColor("#1B2230"))
    palette.setColor(QPalette.ToolTipText, QColor("#E6EDF3"))
    palette.setColor(QPalette.Highlight, QColor("#2563EB"))
    palette.setColor(QPalette.HighlightedText, QColor("#FFFFFF"))
    app.setPalette(palette)


def _find_qss_path() -> Path | None:
    candidates = [
        Path(__file__).resolve().parent / "ui" / "styles.qss",
        PROJECT_ROOT / "taskboard" / "ui" / "styles.qss",
    ]
    meipass = getattr(sys, "_MEIPASS", None)
    if meipass:
        candidates.append(Path(meipass) / "taskboard" / "ui" / "styles.qss")

    for path in candidates:
        if path.exists():
            return path
    return None


def load_styles(app: QApplication) -> None:
    qss_path = _find_qss_path()
    if qss_path:
        app.setStyleSheet(qss_path.read_text(encoding="utf-8"))


def main() -> None:
    settings = load_settings()
    setup_logging(settings, "client.log")

    app = QApplication(sys.argv)
    app.setStyle(QStyleFactory.create("Fusion"))
    _apply_dark_palette(app)
    app.setFont(QFont("Bahnschrift", 10))
    load_styles(app)

    client = TaskRpcClient(settings.rpc_url, timeout=settings.rpc_timeout)
    try:
        client.healthcheck()
    except TaskboardError as exc:
        QMessageBox.critical(None, "Server error", str(exc))
        client.close()
        return

    window = MainWindow(client)
    window.show()
    exit_code = app.exec()
    client.close()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
