"""View-state resolution: which list filter the client is looking at.

The filter lives in a cookie owned by the client. Its value is trusted
verbatim: only an exact match against ``INCOMPLETE`` selects the filtered
list, any other value (including unknown ones) behaves as ``ALL`` and is
echoed back unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from starlette.responses import Response

from todo_server.models.todos import ViewState

logger = logging.getLogger(__name__)

VIEW_COOKIE_NAME = "View"
VIEW_COOKIE_MAX_AGE = 24 * 60 * 60
VIEW_COOKIE_PATH = "/"


@dataclass(frozen=True)
class ResolvedView:
    """The effective view for one request.

    Attributes:
        value: Raw view value, as supplied by the client or defaulted
        persist: Whether the response must (re-)set the view cookie
    """

    value: str
    persist: bool = False

    @property
    def filter(self) -> ViewState:
        if self.value == ViewState.INCOMPLETE.value:
            return ViewState.INCOMPLETE
        return ViewState.ALL


def resolve_view(cookie_value: str | None) -> ResolvedView:
    """Resolve the view from the request cookie, defaulting to ALL."""
    if cookie_value is None:
        logger.debug("No %s cookie in request, defaulting to %s", VIEW_COOKIE_NAME, ViewState.ALL.value)
        return ResolvedView(value=ViewState.ALL.value, persist=True)
    return ResolvedView(value=cookie_value)


def select_view(requested: str) -> ResolvedView:
    """Switch to an explicitly requested view; always persisted."""
    return ResolvedView(value=requested, persist=True)


def persist_view(response: Response, view: ResolvedView) -> None:
    """Write the view cookie onto ``response`` when the view asks for it."""
    if not view.persist:
        return
    logger.debug("Setting %s cookie: %s", VIEW_COOKIE_NAME, view.value)
    response.set_cookie(
        VIEW_COOKIE_NAME,
        view.value,
        max_age=VIEW_COOKIE_MAX_AGE,
        path=VIEW_COOKIE_PATH,
    )
