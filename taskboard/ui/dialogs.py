from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from PySide6.QtWidgets import (
    QComboBox,
    QDateTimeEdit,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLineEdit,
    QMessageBox,
    QTextEdit,
    QVBoxLayout,
)

from taskboard.domain.entities import TaskChanges, TaskEntity
from taskboard.domain.enums import TaskStatus

from .presentation import BOARD_ORDER, STATUS_LABELS, edited_fields, to_local


def _to_utc(value: datetime) -> datetime:
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class TaskDialog(QDialog):
    """Create form when ``task`` is None, edit form otherwise."""

    def __init__(self, task: Optional[TaskEntity] = None, parent=None):
        super().__init__(parent)
        self.task = task
        self.setWindowTitle("Редагувати задачу" if task else "Нова задача")
        self.setObjectName("TaskDialog")
        self.resize(460, 360)

        self.title_input = QLineEdit()
        self.title_input.setPlaceholderText("Що потрібно зробити?")

        self.description_input = QTextEdit()
        self.description_input.setPlaceholderText("Опис (необов'язково)")

        self.due_input = QDateTimeEdit()
        self.due_input.setCalendarPopup(True)
        self.due_input.setDisplayFormat("dd.MM.yyyy HH:mm")

        self.status_input = QComboBox()
        for status in BOARD_ORDER:
            self.status_input.addItem(STATUS_LABELS[status], status.value)

        if task:
            self.title_input.setText(task.title)
            self.description_input.setPlainText(task.description or "")
            self.due_input.setDateTime(to_local(task.due_date))
            self.status_input.setCurrentIndex(self.status_input.findData(task.status.value))
        else:
            self.due_input.setDateTime(datetime.now() + timedelta(days=1))

        form = QFormLayout()
        form.addRow("Назва", self.title_input)
        form.addRow("Опис", self.description_input)
        form.addRow("Дедлайн", self.due_input)
        form.addRow("Статус", self.status_input)

        buttons = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self._accept_if_valid)
        buttons.rejected.connect(self.reject)

        layout = QVBoxLayout(self)
        layout.addLayout(form)
        layout.addWidget(buttons)

    def _accept_if_valid(self) -> None:
        if not self.title_input.text().strip():
            QMessageBox.warning(self, "Помилка", "Назва задачі обов'язкова.")
            return
        self.accept()

    def title(self) -> str:
        return self.title_input.text().strip()

    def description(self) -> Optional[str]:
        text = self.description_input.toPlainText().strip()
        return text or None

    def due_date(self) -> datetime:
        return _to_utc(self.due_input.dateTime().toPython())

    def status(self) -> TaskStatus:
        return TaskStatus(self.status_input.currentData())

    def changes(self) -> TaskChanges:
        """Only the fields that differ from the task being edited."""
        if self.task is None:
            raise ValueError("changes() is only available when editing a task")
        return edited_fields(
            self.task, self.title(), self.description(), self.due_date(), self.status()
        )
