from __future__ import annotations

import logging

from PySide6.QtCore import Qt
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QComboBox,
    QFrame,
    QHBoxLayout,
    QLabel,
    QMessageBox,
    QPushButton,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from taskboard.client.rpc_client import TaskRpcClient
from taskboard.domain.entities import TaskChanges, TaskEntity
from taskboard.domain.enums import SortDirection, SortField, TaskStatus
from taskboard.domain.errors import TaskboardError

from .dialogs import TaskDialog
from .kanban import KanbanBoard
from .presentation import (
    BOARD_ORDER,
    DIRECTION_LABELS,
    SORT_LABELS,
    STATUS_LABELS,
    is_overdue,
    remove_task,
    merge_task,
)
from .widgets import TaskListWidget

logger = logging.getLogger(__name__)


class MainWindow(QWidget):
    def __init__(self, client: TaskRpcClient):
        super().__init__()
        self.setWindowTitle("Taskboard")
        self.resize(1280, 760)

        self.client = client
        self.tasks: list[TaskEntity] = []

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(12)

        layout.addWidget(self._build_header())
        layout.addWidget(self._build_action_bar())

        self.tabs = QTabWidget()
        self.board = KanbanBoard(self.on_drop_status, self.edit_task)
        self.task_list = TaskListWidget()
        self.task_list.setObjectName("TaskList")
        self.task_list.itemDoubleClicked.connect(
            lambda item: self.edit_task(item.data(Qt.UserRole))
        )
        self.tabs.addTab(self.board, "Дошка")
        self.tabs.addTab(self.task_list, "Список")
        layout.addWidget(self.tabs, 1)

        QShortcut(QKeySequence("Ctrl+N"), self, self.new_task)
        QShortcut(QKeySequence("F5"), self, self.refresh_tasks)
        QShortcut(QKeySequence(QKeySequence.Delete), self, self.delete_selected)

        self.refresh_tasks()

    def _build_header(self) -> QWidget:
        frame = QFrame()
        header = QHBoxLayout(frame)
        header.setContentsMargins(0, 0, 0, 0)
        title = QLabel("Мої задачі")
        title.setProperty("class", "panel-title")
        self.stats_label = QLabel("")
        self.stats_label.setProperty("class", "stats-badge")
        header.addWidget(title)
        header.addStretch()
        header.addWidget(self.stats_label)
        return frame

    def _build_action_bar(self) -> QWidget:
        action_bar = QFrame()
        action_bar.setObjectName("ActionBar")
        actions = QHBoxLayout(action_bar)
        actions.setContentsMargins(0, 0, 0, 0)
        actions.setSpacing(8)

        new_button = QPushButton("Нова задача")
        new_button.clicked.connect(self.new_task)

        self.status_filter = QComboBox()
        self.status_filter.addItem("Усі", None)
        for status in BOARD_ORDER:
            self.status_filter.addItem(STATUS_LABELS[status], status.value)

        self.sort_field = QComboBox()
        for field, label in SORT_LABELS.items():
            self.sort_field.addItem(label, field.value)

        self.sort_direction = QComboBox()
        for direction, label in DIRECTION_LABELS.items():
            self.sort_direction.addItem(label, direction.value)

        for combo in (self.status_filter, self.sort_field, self.sort_direction):
            combo.currentIndexChanged.connect(self.refresh_tasks)

        edit_button = QPushButton("Редагувати")
        edit_button.setProperty("variant", "secondary")
        edit_button.clicked.connect(lambda: self.edit_task(self._selected_task_id()))

        delete_button = QPushButton("Видалити")
        delete_button.setProperty("variant", "ghost")
        delete_button.clicked.connect(self.delete_selected)

        refresh_button = QPushButton("Оновити")
        refresh_button.setProperty("variant", "secondary")
        refresh_button.clicked.connect(self.refresh_tasks)

        actions.addWidget(new_button)
        actions.addWidget(QLabel("Статус"))
        actions.addWidget(self.status_filter)
        actions.addWidget(QLabel("Сортування"))
        actions.addWidget(self.sort_field)
        actions.addWidget(self.sort_direction)
        actions.addStretch()
        actions.addWidget(edit_button)
        actions.addWidget(delete_button)
        actions.addWidget(refresh_button)
        return action_bar

    def refresh_tasks(self) -> None:
        try:
            self.tasks = self.client.get_tasks(
                status=self._status_filter(),
                sort_by=SortField(self.sort_field.currentData()),
                sort_direction=SortDirection(self.sort_direction.currentData()),
            )
        except TaskboardError as exc:
            self._show_error(exc)
            return
        self._render()

    def _status_filter(self) -> TaskStatus | None:
        value = self.status_filter.currentData()
        return TaskStatus(value) if value else None

    def _render(self) -> None:
        self.board.set_tasks(self.tasks)
        self.task_list.set_tasks(self.tasks)
        overdue = sum(1 for task in self.tasks if is_overdue(task))
        self.stats_label.setText(f"Усього: {len(self.tasks)} | Прострочено: {overdue}")

    def _selected_task_id(self) -> int | None:
        if self.tabs.currentWidget() is self.task_list:
            return self.task_list.selected_task_id()
        return self.board.selected_task_id()

    def _find_task(self, task_id: int | None) -> TaskEntity | None:
        return next((task for task in self.tasks if task.id == task_id), None)

    def new_task(self) -> None:
        dialog = TaskDialog(parent=self)
        if not dialog.exec():
            return
        try:
            task = self.client.create_task(
                title=dialog.title(),
                description=dialog.description(),
                due_date=dialog.due_date(),
                status=dialog.status(),
            )
        except TaskboardError as exc:
            self._show_error(exc)
            return
        self.tasks = merge_task(self.tasks, task, self._status_filter())
        self._render()

    def edit_task(self, task_id: int | None) -> None:
        task = self._find_task(task_id)
        if not task:
            return
        dialog = TaskDialog(task, parent=self)
        if not dialog.exec():
            return
        changes = dialog.changes()
        if changes.is_empty():
            return
        self._apply_changes(task.id, changes)

    def on_drop_status(self, task_id: int, status: TaskStatus) -> None:
        task = self._find_task(task_id)
        if not task or task.status == status:
            return
        self._apply_changes(task_id, TaskChanges(status=status))

    def _apply_changes(self, task_id: int, changes: TaskChanges) -> None:
        try:
            updated = self.client.update_task(task_id, changes)
        except TaskboardError as exc:
            self._show_error(exc)
            return
        self.tasks = merge_task(self.tasks, updated, self._status_filter())
        self._render()

    def delete_selected(self) -> None:
        task = self._find_task(self._selected_task_id())
        if not task:
            return
        answer = QMessageBox.question(
            self,
            "Видалення",
            f"Видалити задачу «{task.title}»?",
        )
        if answer != QMessageBox.Yes:
            return
        try:
            self.client.delete_task(task.id)
        except TaskboardError as exc:
            self._show_error(exc)
            return
        self.tasks = remove_task(self.tasks, task.id)
        self._render()

    def _show_error(self, exc: Exception) -> None:
        logger.warning("Task operation failed: %s", exc)
        QMessageBox.critical(self, "Помилка", str(exc))
