from __future__ import annotations

from PySide6.QtCore import QMimeData, QSize, Qt
from PySide6.QtGui import QDrag
from PySide6.QtWidgets import (
    QAbstractItemView,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

from taskboard.domain.entities import TaskEntity
from taskboard.domain.enums import TaskStatus

from .presentation import (
    STATUS_COLORS,
    STATUS_LABELS,
    drag_text,
    format_due,
    is_overdue,
    task_id_from_drag_text,
)


def _task_id_from_mime(mime: QMimeData) -> int | None:
    if not mime.hasText():
        return None
    return task_id_from_drag_text(mime.text())


class TaskItemWidget(QWidget):
    def __init__(self, task: TaskEntity):
        super().__init__()
        self.task = task

        self.setObjectName("TaskCard")
        self.setAttribute(Qt.WA_StyledBackground, True)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)
        self.setMinimumHeight(64)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 8, 12, 8)
        layout.setSpacing(4)

        title = QLabel(task.title)
        title.setProperty("class", "task-title")
        title.setWordWrap(True)
        title.setMinimumWidth(0)
        title.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Preferred)

        status = QLabel(STATUS_LABELS[task.status])
        status.setProperty("class", "task-status")
        status.setStyleSheet(f"background-color: {STATUS_COLORS[task.status]};")
        status.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)

        header = QHBoxLayout()
        header.setSpacing(8)
        header.addWidget(title, 1)
        header.addWidget(status, 0, Qt.AlignTop)
        layout.addLayout(header)

        if task.description:
            description = QLabel(task.description)
            description.setProperty("class", "task-description")
            description.setWordWrap(True)
            layout.addWidget(description)

        meta_parts = [f"Дедлайн: {format_due(task.due_date)}"]
        if is_overdue(task):
            meta_parts.append("Прострочено")
        meta = QLabel(" | ".join(meta_parts))
        meta.setProperty("class", "task-meta")
        meta.setProperty("overdue", is_overdue(task))
        meta.setWordWrap(True)
        layout.addWidget(meta)

    def set_selected(self, selected: bool) -> None:
        self.setProperty("selected", selected)
        self.style().unpolish(self)
        self.style().polish(self)


class TaskListWidget(QListWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self._h_margin = 12
        self._v_margin = 8
        self.setDragEnabled(True)
        self.setDragDropMode(QAbstractItemView.DragOnly)
        self.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self._update_viewport_margins()

    def set_tasks(self, tasks: list[TaskEntity]) -> None:
        self.clear()
        for task in tasks:
            item = QListWidgetItem()
            self.addItem(item)
            item.setData(Qt.UserRole, task.id)
            widget = TaskItemWidget(task)
            item.setSizeHint(widget.sizeHint())
            self.setItemWidget(item, widget)
        self.sync_item_sizes()

    def selected_task_id(self) -> int | None:
        item = self.currentItem()
        return item.data(Qt.UserRole) if item else None

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self.sync_item_sizes()

    def _update_viewport_margins(self) -> None:
        scrollbar_width = self.verticalScrollBar().width() or self.verticalScrollBar().sizeHint().width()
        right_margin = self._h_margin + (scrollbar_width if self.verticalScrollBar().isVisible() else 0)
        self.setViewportMargins(self._h_margin, self._v_margin, right_margin, self._v_margin)

    def sync_item_sizes(self) -> None:
        self._update_viewport_margins()
        viewport_width = self.viewport().width()
        for index in range(self.count()):
            item = self.item(index)
            widget = self.itemWidget(item)
            if widget:
                widget.setMinimumWidth(viewport_width)
                widget.setMaximumWidth(viewport_width)
                widget.adjustSize()
                hint = widget.sizeHint()
                item.setSizeHint(QSize(viewport_width, hint.height()))
                widget.resize(viewport_width, hint.height())

    def startDrag(self, supportedActions: Qt.DropActions) -> None:  # type: ignore[name-defined]
        task_id = self.selected_task_id()
        if not task_id:
            return
        mime = QMimeData()
        mime.setText(drag_text(task_id))
        drag = QDrag(self)
        drag.setMimeData(mime)
        drag.exec(Qt.MoveAction)


class KanbanListWidget(TaskListWidget):
    """Board column; dropping a card from another column moves it to this status."""

    def __init__(self, status: TaskStatus, on_drop_status, parent=None):
        super().__init__(parent)
        self.status = status
        self._on_drop_status = on_drop_status
        self.setAcceptDrops(True)
        self.setDropIndicatorShown(True)
        self.setDragDropMode(QAbstractItemView.DragDrop)

    def dragEnterEvent(self, event) -> None:  # type: ignore[override]
        if _task_id_from_mime(event.mimeData()) is not None and event.source() is not self:
            event.acceptProposedAction()

    def dragMoveEvent(self, event) -> None:  # type: ignore[override]
        if _task_id_from_mime(event.mimeData()) is not None and event.source() is not self:
            event.acceptProposedAction()

    def dropEvent(self, event) -> None:  # type: ignore[override]
        task_id = _task_id_from_mime(event.mimeData())
        if task_id is None or event.source() is self:
            return
        self._on_drop_status(task_id, self.status)
        event.acceptProposedAction()
