"""Create, edit and view flows for a single student record."""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum

from student_records.adapters.student_api_client import StudentApiClient
from student_records.domain.errors import (
    ApiError,
    RecordWriteFailed,
    StudentRecordsError,
    UploadFailed,
    ValidationFailed,
)
from student_records.domain.records import (
    FreeText,
    RecordDraft,
    RecordForm,
    StudentRecord,
    collect_subjects,
    form_from_record,
)
from student_records.services.interaction import NoticeLevel, Notifier, Prompter
from student_records.services.lookup import LookupResolver
from student_records.services.uploads import UploadPipeline

_logger = logging.getLogger(__name__)


class FormMode(str, Enum):
    CREATE = "create"
    UPDATE = "update"


@dataclass
class RecordFormController:
    """Orchestrates state resolution, the record write, and photo upload."""

    client: StudentApiClient
    resolver: LookupResolver
    uploads: UploadPipeline
    notifier: Notifier
    prompter: Prompter
    update_password: str

    async def load(self, student_id: int) -> StudentRecord:
        """Fetch a record for display."""
        payload = await self.client.get_student(student_id)
        return StudentRecord.model_validate(payload)

    async def load_form(self, student_id: int) -> RecordForm:
        """Fetch a record and turn it into an editable form."""
        return form_from_record(await self.load(student_id))

    async def submit(
        self,
        form: RecordForm,
        mode: FormMode,
        existing_id: int | None = None,
        confirmation: str | None = None,
    ) -> int:
        """Validate, resolve the state, write the record, then upload photos.

        Raises ValidationFailed before any network call. A ResolutionFailed
        aborts before the record is written. UploadFailed means the record
        was saved without the new photos.
        """
        if mode is FormMode.UPDATE:
            if existing_id is None:
                raise ValueError("existing_id is required for updates")
            if confirmation != self.update_password:
                raise ValidationFailed(["password"], "Wrong Password")
        fields = _validate(form)

        resolution = await self.resolver.resolve(form.state)
        draft = RecordDraft(state_id=resolution.id, **fields)

        try:
            if mode is FormMode.CREATE:
                response = await self.client.create_student(draft.to_payload())
                student_id = _created_id(response)
            else:
                await self.client.update_student(
                    existing_id, draft.to_payload(), password=confirmation
                )
                student_id = existing_id
        except ApiError as exc:
            raise RecordWriteFailed() from exc
        _logger.info("Saved student %s (%s)", student_id, mode.value)

        if form.photos:
            await self.uploads.upload(student_id, form.photos)
        return student_id

    async def save(
        self, form: RecordForm, mode: FormMode, existing_id: int | None = None
    ) -> int | None:
        """Run a submission and report its outcome as one notification."""
        confirmation = None
        if mode is FormMode.UPDATE:
            confirmation = await self.prompter.ask_secret("Enter password to update")
            if confirmation is None:
                return None
        try:
            student_id = await self.submit(form, mode, existing_id, confirmation)
        except ValidationFailed as exc:
            title = "Wrong Password" if "password" in exc.fields else exc.user_message
            self.notifier.notify(NoticeLevel.ERROR, title)
            return None
        except UploadFailed as exc:
            _logger.exception("Photo upload failed for student %s", exc.record_id)
            self.notifier.notify(NoticeLevel.WARNING, "Saved", exc.user_message)
            return exc.record_id
        except StudentRecordsError as exc:
            _logger.exception("Saving student failed")
            self.notifier.notify(NoticeLevel.ERROR, "Error", exc.user_message)
            return None
        if mode is FormMode.CREATE:
            self.notifier.notify(
                NoticeLevel.SUCCESS, "Saved", "Student created successfully"
            )
        else:
            self.notifier.notify(NoticeLevel.SUCCESS, "Updated")
        return student_id


def _validate(form: RecordForm) -> dict[str, object]:
    """Check required fields and convert raw input into draft values."""
    invalid: list[str] = []
    name = form.name.strip()
    if not name:
        invalid.append("name")
    age = _parse_age(form.age)
    if age is None:
        invalid.append("age")
    dob = _parse_dob(form.dob)
    if dob is None:
        invalid.append("dob")
    phone = form.phone.strip()
    if not phone:
        invalid.append("phone")
    if form.state is None or (
        isinstance(form.state, FreeText) and not form.state.name.strip()
    ):
        invalid.append("state")
    if invalid:
        raise ValidationFailed(invalid)
    return {
        "name": name,
        "age": age,
        "dob": dob,
        "address": form.address.strip(),
        "phone": phone,
        "subjects": collect_subjects(form.subjects),
    }


def _parse_age(raw: str | int) -> int | None:
    value = str(raw).strip()
    if not (value.isascii() and value.isdigit()):
        return None
    age = int(value)
    return age if age > 0 else None


def _parse_dob(raw: str | date) -> date | None:
    if isinstance(raw, date):
        return raw
    value = raw.strip().split("T")[0]
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def _created_id(response: object) -> int:
    """Read the new student id from the create response."""
    raw = response.get("student_id") if isinstance(response, dict) else None
    if isinstance(raw, bool) or raw in (None, ""):
        raise RecordWriteFailed("Create response carried no student id")
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise RecordWriteFailed("Create response carried no student id") from exc
