"""Shared test fixtures."""

from dataclasses import dataclass, field

import httpx
import pytest

from student_records.adapters.student_api_client import (
    HttpxStudentApiClient,
    StudentApiClient,
)
from student_records.config import Settings
from student_records.domain.errors import ApiError
from student_records.domain.uploads import FileHandle
from student_records.services.auth import Session
from student_records.services.cache import InMemoryCache
from student_records.services.interaction import (
    ListRenderer,
    NoticeLevel,
    Notifier,
    Prompter,
)
from student_records.services.listing import ListController, StudentListView
from student_records.services.lookup import LookupResolver, StateDirectory
from student_records.services.records import RecordFormController
from student_records.services.uploads import ImageCompressor, UploadPipeline


def _student(student_id: int, name: str) -> dict[str, object]:
    return {
        "studentId": student_id,
        "name": name,
        "age": 20,
        "dob": "2004-03-01T00:00:00",
        "address": "1 Main St",
        "stateId": 1,
        "stateName": "Ohio",
        "phone": "555-0100",
        "subjects": ["Math"],
        "photos": [],
    }


@dataclass
class FakeStudentApiClient(StudentApiClient):
    """Fake student API that records every call in order."""

    calls: list[tuple[str, tuple]] = field(default_factory=list)
    total: int = 12
    students: dict[int, dict[str, object]] = field(
        default_factory=lambda: {7: _student(7, "Ada")}
    )
    states: list[dict[str, object]] = field(
        default_factory=lambda: [{"state_id": 1, "state_name": "Ohio"}]
    )
    create_state_payload: object = field(default_factory=lambda: {"state_id": 31})
    create_student_payload: object = field(default_factory=lambda: {"student_id": 101})
    token: str = "issued-token"
    failures: dict[str, Exception] = field(default_factory=dict)

    def _record(self, name: str, *args: object) -> None:
        self.calls.append((name, args))
        if name in self.failures:
            raise self.failures[name]

    @property
    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    async def login(self, username: str, password: str) -> str:
        self._record("login", username, password)
        return self.token

    async def list_students(
        self, page: int, page_size: int, search: str
    ) -> dict[str, object]:
        self._record("list_students", page, page_size, search)
        start = (page - 1) * page_size
        count = max(0, min(page_size, self.total - start))
        return {
            "items": [
                _student(number, f"Student {number}")
                for number in range(start + 1, start + count + 1)
            ],
            "total": self.total,
            "page": page,
            "pageSize": page_size,
        }

    async def get_student(self, student_id: int) -> dict[str, object]:
        self._record("get_student", student_id)
        return self.students[student_id]

    async def delete_student(self, student_id: int) -> None:
        self._record("delete_student", student_id)
        self.total -= 1

    async def create_student(self, payload: dict[str, object]) -> dict[str, object]:
        self._record("create_student", payload)
        return self.create_student_payload

    async def update_student(
        self, student_id: int, payload: dict[str, object], password: str
    ) -> None:
        self._record("update_student", student_id, payload, password)

    async def upload_photos(self, student_id: int, files: list[FileHandle]) -> None:
        self._record("upload_photos", student_id, files)

    async def list_states(self) -> list[dict[str, object]]:
        self._record("list_states")
        return self.states

    async def create_state(self, name: str) -> dict[str, object]:
        self._record("create_state", name)
        return self.create_state_payload


@dataclass
class FakeCompressor(ImageCompressor):
    """Compressor that shrinks everything except the named files."""

    failing: set[str] = field(default_factory=set)
    seen: list[str] = field(default_factory=list)

    async def compress(self, file: FileHandle) -> FileHandle:
        self.seen.append(file.filename)
        if file.filename in self.failing:
            raise OSError(f"cannot identify image file {file.filename}")
        return FileHandle(file.filename, b"small", "image/jpeg")


@dataclass
class FakePrompter(Prompter):
    """Prompter with canned answers."""

    confirm_answer: bool = True
    secret: str | None = "72991"
    text: str | None = None
    asked: list[str] = field(default_factory=list)

    async def confirm(self, title: str) -> bool:
        self.asked.append(title)
        return self.confirm_answer

    async def ask_secret(self, title: str) -> str | None:
        self.asked.append(title)
        return self.secret

    async def ask_text(self, title: str) -> str | None:
        self.asked.append(title)
        return self.text


@dataclass
class RecordingNotifier(Notifier):
    """Notifier that keeps every notice."""

    notices: list[tuple[NoticeLevel, str, str]] = field(default_factory=list)

    def notify(self, level: NoticeLevel, title: str, text: str = "") -> None:
        self.notices.append((level, title, text))


@dataclass
class RecordingRenderer(ListRenderer):
    """Renderer that keeps every rendered view."""

    views: list[StudentListView] = field(default_factory=list)

    def render(self, view: StudentListView) -> None:
        self.views.append(view)


def photo(name: str) -> FileHandle:
    return FileHandle(name, b"\xff\xd8\xff" + name.encode(), "image/jpeg")


@pytest.fixture
def settings() -> Settings:
    return Settings(api_base_url="https://api.test")


@pytest.fixture
def api_client() -> FakeStudentApiClient:
    return FakeStudentApiClient()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def prompter() -> FakePrompter:
    return FakePrompter()


@pytest.fixture
def compressor() -> FakeCompressor:
    return FakeCompressor()


@pytest.fixture
def state_directory(api_client: FakeStudentApiClient) -> StateDirectory:
    return StateDirectory(client=api_client, cache=InMemoryCache())


@pytest.fixture
def resolver(state_directory: StateDirectory) -> LookupResolver:
    return LookupResolver(state_directory)


@pytest.fixture
def upload_pipeline(
    api_client: FakeStudentApiClient, compressor: FakeCompressor
) -> UploadPipeline:
    return UploadPipeline(client=api_client, compressor=compressor)


@pytest.fixture
def list_controller(
    api_client: FakeStudentApiClient,
    notifier: RecordingNotifier,
    prompter: FakePrompter,
) -> ListController:
    return ListController(
        client=api_client,
        notifier=notifier,
        prompter=prompter,
        renderer=RecordingRenderer(),
    )


@pytest.fixture
def record_form(
    api_client: FakeStudentApiClient,
    resolver: LookupResolver,
    upload_pipeline: UploadPipeline,
    notifier: RecordingNotifier,
    prompter: FakePrompter,
) -> RecordFormController:
    return RecordFormController(
        client=api_client,
        resolver=resolver,
        uploads=upload_pipeline,
        notifier=notifier,
        prompter=prompter,
        update_password="72991",
    )


def api_error(status_code: int = 500) -> ApiError:
    return ApiError(status_code, "boom")


def mock_http_api(handler) -> HttpxStudentApiClient:  # type: ignore[no-untyped-def]
    """Real httpx client routed through a MockTransport handler."""
    session = Session()
    session.init("jwt")
    return HttpxStudentApiClient(
        base_url="https://api.test",
        session=session,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


def unreachable(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)
