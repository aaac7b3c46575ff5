"""Interfaces to the user-facing collaborators: notices, prompts, rendering."""

import logging
from enum import Enum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from student_records.services.listing import StudentListView

_logger = logging.getLogger(__name__)


class NoticeLevel(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Notifier(Protocol):
    """Shows one user-visible notification per finished action."""

    def notify(self, level: NoticeLevel, title: str, text: str = "") -> None:
        """Show a notification."""


class Prompter(Protocol):
    """Blocking yes/no and value prompts. None means the operator cancelled."""

    async def confirm(self, title: str) -> bool:
        """Ask a yes/no question."""

    async def ask_secret(self, title: str) -> str | None:
        """Ask for a masked value."""

    async def ask_text(self, title: str) -> str | None:
        """Ask for a free-text value."""


class ListRenderer(Protocol):
    """Displays the current student list page."""

    def render(self, view: "StudentListView") -> None:
        """Render a list view."""


class LoggingNotifier(Notifier):
    """Notifier that writes notices to the application log."""

    def notify(self, level: NoticeLevel, title: str, text: str = "") -> None:
        message = f"{title}: {text}" if text else title
        if level is NoticeLevel.ERROR:
            _logger.error(message)
        elif level is NoticeLevel.WARNING:
            _logger.warning(message)
        else:
            _logger.info(message)
