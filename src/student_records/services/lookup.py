"""State lookups: cached directory and resolve-or-create."""

import logging
from dataclasses import dataclass

from pydantic import ValidationError

from student_records.adapters.student_api_client import StudentApiClient
from student_records.domain.errors import ApiError, ResolutionFailed
from student_records.domain.records import (
    FreeText,
    LookupInput,
    Selected,
    StateRecord,
    parse_lookup_input,
)
from student_records.services.cache import Cache
from student_records.services.interaction import NoticeLevel, Notifier, Prompter

_STATES_CACHE_KEY = "states:all"

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a state input."""

    id: int
    was_created: bool


@dataclass
class StateDirectory:
    """Cached list of known states."""

    client: StudentApiClient
    cache: Cache
    ttl_seconds: int = 300

    async def list_states(self) -> list[StateRecord]:
        """Return known states, fetching when the cache is cold."""
        cached = self.cache.get(_STATES_CACHE_KEY)
        if isinstance(cached, list):
            return cached
        payload = await self.client.list_states()
        states = [StateRecord.model_validate(item) for item in payload]
        self.cache.set(_STATES_CACHE_KEY, states, ttl_seconds=self.ttl_seconds)
        return states

    def invalidate(self) -> None:
        self.cache.delete(_STATES_CACHE_KEY)

    async def refresh(self) -> list[StateRecord]:
        """Drop the cached list and fetch it again; failures leave it empty."""
        self.invalidate()
        try:
            return await self.list_states()
        except (ApiError, ValidationError):
            _logger.exception("Failed to reload states")
            return []

    async def create(self, name: str) -> int:
        """Create a state by name and return the server-assigned id."""
        try:
            payload = await self.client.create_state(name)
        except ApiError as exc:
            raise ResolutionFailed(f"Creating state {name!r} failed") from exc
        state_id = _usable_id(payload)
        if state_id is None:
            raise ResolutionFailed(f"Creating state {name!r} returned no id")
        await self.refresh()
        return state_id


@dataclass
class LookupResolver:
    """Turns a state input into a durable state id."""

    directory: StateDirectory

    async def resolve(self, lookup: LookupInput | str) -> Resolution:
        """Reuse a selected id or create the named state on the server."""
        if isinstance(lookup, str):
            lookup = parse_lookup_input(lookup)
        match lookup:
            case Selected(id=state_id):
                return Resolution(id=state_id, was_created=False)
            case FreeText(name=name):
                state_id = await self.directory.create(name.strip())
                _logger.info("Created state %r with id=%s", name, state_id)
                return Resolution(id=state_id, was_created=True)
        raise TypeError(f"Unsupported lookup input: {lookup!r}")

    async def save_state_interactively(
        self, prompter: Prompter, notifier: Notifier
    ) -> int | None:
        """Ask the operator for a state name and create it."""
        name = await prompter.ask_text("Save State Name")
        if not name or not name.strip():
            return None
        try:
            state_id = await self.directory.create(name.strip())
        except ResolutionFailed:
            _logger.exception("Saving state %r failed", name)
            notifier.notify(NoticeLevel.ERROR, "Error", ResolutionFailed.user_message)
            return None
        notifier.notify(NoticeLevel.SUCCESS, "Saved")
        return state_id


def _usable_id(payload: object) -> int | None:
    """Extract a positive state id from a create response."""
    if not isinstance(payload, dict):
        return None
    raw = payload.get("state_id")
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if raw > 0 else None
    if isinstance(raw, str) and raw.strip().isdigit():
        value = int(raw.strip())
        return value if value > 0 else None
    return None
