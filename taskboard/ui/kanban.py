from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QHBoxLayout, QLabel, QVBoxLayout, QWidget

from taskboard.domain.entities import TaskEntity
from taskboard.domain.enums import TaskStatus

from .presentation import BOARD_ORDER, STATUS_LABELS, group_by_status
from .widgets import KanbanListWidget


class KanbanBoard(QWidget):
    def __init__(self, on_drop_status, on_open_task, parent=None):
        super().__init__(parent)
        self._on_open_task = on_open_task

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(12)

        self.columns: dict[TaskStatus, KanbanListWidget] = {}
        self.titles: dict[TaskStatus, QLabel] = {}
        for status in BOARD_ORDER:
            column = QVBoxLayout()
            label = QLabel(STATUS_LABELS[status])
            label.setProperty("class", "panel-title")
            list_widget = KanbanListWidget(status, on_drop_status)
            list_widget.setObjectName("KanbanList")
            list_widget.itemDoubleClicked.connect(self._open_item)
            list_widget.itemClicked.connect(lambda _item, source=list_widget: self._select_only(source))
            column.addWidget(label)
            column.addWidget(list_widget)
            layout.addLayout(column, 1)
            self.columns[status] = list_widget
            self.titles[status] = label

    def set_tasks(self, tasks: list[TaskEntity]) -> None:
        grouped = group_by_status(tasks)
        for status, list_widget in self.columns.items():
            self.titles[status].setText(f"{STATUS_LABELS[status]} ({len(grouped[status])})")
            list_widget.set_tasks(grouped[status])

    def selected_task_id(self) -> int | None:
        for list_widget in self.columns.values():
            if list_widget.selectedItems():
                return list_widget.selected_task_id()
        return None

    def _select_only(self, source: KanbanListWidget) -> None:
        for list_widget in self.columns.values():
            if list_widget is not source:
                list_widget.clearSelection()

    def _open_item(self, item) -> None:
        task_id = item.data(Qt.UserRole)
        if task_id:
            self._on_open_task(task_id)
