"""Request orchestration: store changes followed by the fragments that keep the page consistent.

Each operation returns the HTML body of one response. The first fragment is
the primary swap; the empty-state message and the view toggle follow as
out-of-band swaps rendered from the post-mutation counts and the active view.
"""

from __future__ import annotations

import logging

from todo_server.models.todos import ViewState
from todo_server.services.fragments import Fragment, FragmentRenderer
from todo_server.services.task_store import TaskStore
from todo_server.services.view_state import ResolvedView

logger = logging.getLogger(__name__)


class TodoService:
    """Page and mutation handlers for the todo list."""

    def __init__(self, store: TaskStore, renderer: FragmentRenderer, static_base: str = "/static"):
        self.store = store
        self.renderer = renderer
        self.static_base = static_base

    def page(self, view: ResolvedView) -> str:
        """Render the full page under ``view``."""
        return self.renderer.render(
            Fragment.PAGE,
            tasks=self.store.list_tasks(view.filter),
            show=view.filter.value,
            count=self.store.counts(),
            static_base=self.static_base,
        )

    def create(self, text: str, view: ResolvedView) -> str:
        task = self.store.create_task(text)
        parts = [self.renderer.render(Fragment.TASK_ITEM, task=task)]
        parts.extend(self._consistency_swaps(view))
        return "".join(parts)

    def toggle(self, task_id: str, completed: bool, view: ResolvedView) -> str:
        """Set the completion flag of a task.

        Completing a task while only incomplete tasks are shown re-renders
        the whole list, since the row has to leave the view. Otherwise the
        row itself is re-rendered so its checkbox reflects the new state.
        """
        self.store.set_completed(task_id, completed)

        parts: list[str] = []
        if view.filter is ViewState.INCOMPLETE and completed:
            logger.debug("Re-rendering task list after completing %s", task_id)
            parts.append(
                self.renderer.render(
                    Fragment.TASK_LIST,
                    tasks=self.store.list_tasks(view.filter),
                    oob=True,
                )
            )
        else:
            task = self.store.get_task(task_id)
            if task is not None:
                parts.append(self.renderer.render(Fragment.TASK_ITEM, task=task))

        parts.extend(self._consistency_swaps(view))
        return "".join(parts)

    def delete(self, task_id: str, view: ResolvedView) -> str:
        # Empty primary swap: the client drops the row it targeted.
        self.store.delete_task(task_id)
        return "".join(self._consistency_swaps(view))

    def show(self, view: ResolvedView) -> str:
        """Render the list under a newly selected view."""
        parts = [
            self.renderer.render(Fragment.TASK_LIST, tasks=self.store.list_tasks(view.filter))
        ]
        parts.extend(self._consistency_swaps(view))
        return "".join(parts)

    def _consistency_swaps(self, view: ResolvedView) -> list[str]:
        count = self.store.counts()
        context = {"show": view.filter.value, "count": count, "oob": True}
        return [
            self.renderer.render(Fragment.NO_TASKS, **context),
            self.renderer.render(Fragment.VIEW_TOGGLE, **context),
        ]
