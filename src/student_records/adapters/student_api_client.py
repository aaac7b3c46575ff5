"""Student REST API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from student_records.domain.errors import ApiError, AuthExpired
from student_records.domain.uploads import FileHandle
from student_records.services.auth import Session


class StudentApiClient(Protocol):
    """Interface for the student records HTTP API."""

    async def login(self, username: str, password: str) -> str:
        """Exchange credentials for a bearer token."""

    async def list_students(
        self, page: int, page_size: int, search: str
    ) -> dict[str, object]:
        """Return one raw page of students."""

    async def get_student(self, student_id: int) -> dict[str, object]:
        """Return one raw student record."""

    async def delete_student(self, student_id: int) -> None:
        """Delete a student record."""

    async def create_student(self, payload: dict[str, object]) -> dict[str, object]:
        """Create a student and return the raw response."""

    async def update_student(
        self, student_id: int, payload: dict[str, object], password: str
    ) -> None:
        """Update a student record."""

    async def upload_photos(self, student_id: int, files: list[FileHandle]) -> None:
        """Upload photo files for a student in one multipart request."""

    async def list_states(self) -> list[dict[str, object]]:
        """Return the raw list of states."""

    async def create_state(self, name: str) -> dict[str, object]:
        """Create a state and return the raw response."""


@dataclass
class HttpxStudentApiClient(StudentApiClient):
    """Student API client implemented with httpx."""

    base_url: str
    session: Session
    http_client: httpx.AsyncClient
    timeout: float = 15

    @classmethod
    def create(
        cls, base_url: str, session: Session, timeout: float = 15
    ) -> "HttpxStudentApiClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            session=session,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def login(self, username: str, password: str) -> str:
        """Sign in; the credential is not sent with this call."""
        try:
            response = await self.http_client.post(
                f"{self.base_url}/auth/login",
                json={"username": username, "password": password},
                timeout=self.timeout,
            )
        except httpx.HTTPError as exc:
            raise ApiError(0, str(exc)) from exc
        if not response.is_success:
            raise ApiError(response.status_code, response.text)
        body = _decode_body(response)
        token = body.get("token") if isinstance(body, dict) else None
        if not token:
            raise ApiError(response.status_code, "login response carried no token")
        return token

    async def list_students(
        self, page: int, page_size: int, search: str
    ) -> dict[str, object]:
        """Fetch a page of students."""
        return await self._request(
            "GET",
            "/student/list",
            params={"page": page, "pageSize": page_size, "search": search},
        )

    async def get_student(self, student_id: int) -> dict[str, object]:
        """Fetch a single student."""
        return await self._request("GET", f"/student/{student_id}")

    async def delete_student(self, student_id: int) -> None:
        """Delete a student."""
        await self._request("DELETE", f"/student/{student_id}")

    async def create_student(self, payload: dict[str, object]) -> dict[str, object]:
        """Create a student."""
        return await self._request("POST", "/student/create", json=payload)

    async def update_student(
        self, student_id: int, payload: dict[str, object], password: str
    ) -> None:
        """Update a student, passing the approval secret as a query parameter."""
        await self._request(
            "PUT",
            f"/student/update/{student_id}",
            params={"password": password},
            json=payload,
        )

    async def upload_photos(self, student_id: int, files: list[FileHandle]) -> None:
        """Upload all files under the uniform ``files`` field."""
        multipart = [
            ("files", (item.filename, item.content, item.content_type))
            for item in files
        ]
        await self._request(
            "POST", f"/student/uploadPhotos/{student_id}", files=multipart
        )

    async def list_states(self) -> list[dict[str, object]]:
        """Fetch all states."""
        payload = await self._request("GET", "/student/states")
        return payload if isinstance(payload, list) else []

    async def create_state(self, name: str) -> dict[str, object]:
        """Create a state by name."""
        return await self._request("POST", "/student/states", json={"StateName": name})

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()

    async def _request(self, method: str, path: str, **kwargs: object) -> object:
        """Send a request with the session credential and decode the body."""
        headers: dict[str, str] = {}
        if self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"
        try:
            response = await self.http_client.request(
                method,
                f"{self.base_url}{path}",
                headers=headers,
                timeout=self.timeout,
                **kwargs,
            )
        except httpx.HTTPError as exc:
            raise ApiError(0, str(exc)) from exc
        if response.status_code == httpx.codes.UNAUTHORIZED:
            self.session.teardown()
            raise AuthExpired("Unauthorized")
        if not response.is_success:
            raise ApiError(response.status_code, response.text)
        return _decode_body(response)


def _decode_body(response: httpx.Response) -> object:
    """Decode JSON bodies; empty bodies become an empty dict, others stay text."""
    text = response.text
    if not text.strip():
        return {}
    try:
        return response.json()
    except ValueError:
        return text
