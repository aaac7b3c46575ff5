"""Paginated, searchable student list state machine."""

import logging
import math
from dataclasses import dataclass, field

from pydantic import ValidationError

from student_records.adapters.student_api_client import StudentApiClient
from student_records.domain.errors import StudentRecordsError, ValidationFailed
from student_records.domain.records import StudentPage, StudentRecord
from student_records.services.interaction import (
    ListRenderer,
    NoticeLevel,
    Notifier,
    Prompter,
)

_logger = logging.getLogger(__name__)


def total_pages(total: int, page_size: int) -> int:
    """Number of page controls to show; never fewer than one."""
    return max(1, math.ceil(max(total, 0) / page_size))


@dataclass(frozen=True)
class StudentListView:
    """What the list screen shows after a fetch."""

    items: list[StudentRecord]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.page_size)


@dataclass
class ListController:
    """Owns page, page size and search text; every change re-fetches."""

    client: StudentApiClient
    notifier: Notifier
    prompter: Prompter
    renderer: ListRenderer | None = None
    page_size_options: list[int] = field(default_factory=lambda: [5, 10, 20, 50])
    page: int = 1
    page_size: int = 5
    search: str = ""
    view: StudentListView | None = None
    _generation: int = field(default=0, init=False, repr=False)

    async def set_search(self, text: str) -> StudentListView | None:
        self.search = text
        self.page = 1
        return await self.refresh()

    async def set_page_size(self, size: int) -> StudentListView | None:
        if size not in self.page_size_options:
            raise ValidationFailed(["page_size"], f"Unsupported page size {size}")
        self.page_size = size
        self.page = 1
        return await self.refresh()

    async def set_page(self, page: int) -> StudentListView | None:
        if page < 1:
            raise ValidationFailed(["page"], f"Page must be positive, got {page}")
        self.page = page
        return await self.refresh()

    async def refresh(self) -> StudentListView | None:
        """Fetch the current query; only the newest response is applied."""
        self._generation += 1
        generation = self._generation
        page, page_size, search = self.page, self.page_size, self.search
        try:
            payload = await self.client.list_students(page, page_size, search)
            result = StudentPage.model_validate(payload)
        except (StudentRecordsError, ValidationError):
            _logger.exception("Fetching students failed: page=%s", page)
            if generation == self._generation:
                self.notifier.notify(
                    NoticeLevel.ERROR, "Error", "Could not fetch students"
                )
            return self.view
        if generation != self._generation:
            _logger.debug("Dropping stale student page %s", generation)
            return self.view

        self.view = StudentListView(
            items=result.items,
            total=result.total,
            page=result.page,
            page_size=result.page_size or page_size,
        )
        if self.renderer is not None:
            self.renderer.render(self.view)
        return self.view

    async def delete(self, student_id: int) -> bool:
        """Delete a student after confirmation, then reload the same page."""
        confirmed = await self.prompter.confirm(
            "Are you sure you want to delete this record?"
        )
        if not confirmed:
            return False
        try:
            await self.client.delete_student(student_id)
        except StudentRecordsError:
            _logger.exception("Deleting student %s failed", student_id)
            self.notifier.notify(NoticeLevel.ERROR, "Error", "Could not delete")
            return False
        self.notifier.notify(NoticeLevel.SUCCESS, "Deleted")
        await self.refresh()
        return True
