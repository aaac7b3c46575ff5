"""Tests for the session and sign-in flow."""

import asyncio

from student_records.services.auth import AuthService, Session
from student_records.services.interaction import NoticeLevel
from tests.conftest import FakeStudentApiClient, RecordingNotifier, api_error


def test_session_teardown_runs_hooks() -> None:
    session = Session()
    events: list[str] = []
    session.on_sign_out(lambda: events.append("redirect"))
    session.init("jwt")

    assert session.is_authenticated is True
    session.teardown()

    assert session.is_authenticated is False
    assert events == ["redirect"]


def test_login_starts_session(
    api_client: FakeStudentApiClient, notifier: RecordingNotifier
) -> None:
    session = Session()
    service = AuthService(client=api_client, session=session, notifier=notifier)

    assert asyncio.run(service.login(" admin ", "secret")) is True
    assert session.token == "issued-token"
    assert api_client.calls == [("login", ("admin", "secret"))]

    service.logout()
    assert session.token is None


def test_login_with_blank_fields_skips_network(
    api_client: FakeStudentApiClient, notifier: RecordingNotifier
) -> None:
    service = AuthService(client=api_client, session=Session(), notifier=notifier)

    assert asyncio.run(service.login("admin", "  ")) is False
    assert api_client.calls == []
    assert notifier.notices == [
        (NoticeLevel.ERROR, "Error", "Enter username and password")
    ]


def test_login_rejection_notifies(
    api_client: FakeStudentApiClient, notifier: RecordingNotifier
) -> None:
    api_client.failures["login"] = api_error(400)
    session = Session()
    service = AuthService(client=api_client, session=session, notifier=notifier)

    assert asyncio.run(service.login("admin", "wrong")) is False
    assert session.token is None
    assert notifier.notices == [
        (NoticeLevel.ERROR, "Invalid Username or Password", "")
    ]
