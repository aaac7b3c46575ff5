"""Session credential holder and sign-in flow."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from student_records.domain.errors import ApiError
from student_records.services.interaction import NoticeLevel, Notifier

if TYPE_CHECKING:
    from student_records.adapters.student_api_client import StudentApiClient

_logger = logging.getLogger(__name__)


@dataclass
class Session:
    """Holds the single bearer credential for the running process."""

    token: str | None = None
    _sign_out_hooks: list[Callable[[], None]] = field(default_factory=list)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def init(self, token: str) -> None:
        """Start a session with a freshly issued credential."""
        self.token = token

    def teardown(self) -> None:
        """Discard the credential and run sign-out hooks."""
        self.token = None
        _logger.info("Session ended, signing out")
        for hook in list(self._sign_out_hooks):
            hook()

    def on_sign_out(self, hook: Callable[[], None]) -> None:
        """Register a callback fired when the session is torn down."""
        self._sign_out_hooks.append(hook)


@dataclass
class AuthService:
    """Sign-in and sign-out actions."""

    client: "StudentApiClient"
    session: Session
    notifier: Notifier

    async def login(self, username: str, password: str) -> bool:
        """Exchange credentials for a token and start the session."""
        username = username.strip()
        password = password.strip()
        missing = [
            name
            for name, value in (("username", username), ("password", password))
            if not value
        ]
        if missing:
            self.notifier.notify(
                NoticeLevel.ERROR, "Error", "Enter username and password"
            )
            _logger.info("Login blocked, missing %s", ", ".join(missing))
            return False
        try:
            token = await self.client.login(username, password)
        except ApiError as exc:
            _logger.warning("Login rejected: status=%s", exc.status_code)
            self.notifier.notify(NoticeLevel.ERROR, "Invalid Username or Password")
            return False
        self.session.init(token)
        return True

    def logout(self) -> None:
        """Sign out explicitly."""
        self.session.teardown()
