"""Domain models for student records and their state lookups."""

from dataclasses import dataclass, field
from datetime import date

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from student_records.domain.uploads import FileHandle


def _aliases(*names: str) -> AliasChoices:
    return AliasChoices(*names)


class StudentRecord(BaseModel):
    """Student record as returned by the API, tolerant of key casing."""

    model_config = ConfigDict(populate_by_name=True)

    student_id: int | None = Field(
        default=None, validation_alias=_aliases("studentId", "StudentId", "student_id")
    )
    name: str = Field(default="", validation_alias=_aliases("name", "Name"))
    age: int | None = Field(default=None, validation_alias=_aliases("age", "Age"))
    dob: date | None = Field(default=None, validation_alias=_aliases("dob", "Dob"))
    address: str = Field(
        default="", validation_alias=_aliases("address", "Address")
    )
    state_id: int | None = Field(
        default=None, validation_alias=_aliases("stateId", "StateId", "state_id")
    )
    state_name: str | None = Field(
        default=None, validation_alias=_aliases("stateName", "StateName", "state_name")
    )
    phone: str = Field(default="", validation_alias=_aliases("phone", "Phone"))
    subjects: list[str] = Field(
        default_factory=list,
        validation_alias=_aliases("subjects", "Subjects"),
    )
    photos: list[str] = Field(
        default_factory=list, validation_alias=_aliases("photos", "Photos")
    )

    @field_validator("name", "address", "phone", mode="before")
    @classmethod
    def _blank_text(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("subjects", "photos", mode="before")
    @classmethod
    def _empty_list(cls, value: object) -> object:
        return [] if value is None else value

    @field_validator("dob", mode="before")
    @classmethod
    def _date_part(cls, value: object) -> object:
        if isinstance(value, str):
            return value.split("T")[0] or None
        return value

    @property
    def state_label(self) -> str:
        """Display label for the referenced state."""
        if self.state_name:
            return self.state_name
        return str(self.state_id) if self.state_id is not None else ""


class StudentPage(BaseModel):
    """One page of the student list."""

    model_config = ConfigDict(populate_by_name=True)

    items: list[StudentRecord] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int | None = Field(
        default=None, validation_alias=_aliases("pageSize", "PageSize", "page_size")
    )

    @field_validator("items", mode="before")
    @classmethod
    def _empty_items(cls, value: object) -> object:
        return [] if value is None else value


class StateRecord(BaseModel):
    """State lookup entity."""

    model_config = ConfigDict(populate_by_name=True)

    state_id: int = Field(validation_alias=_aliases("stateId", "StateId", "state_id"))
    state_name: str = Field(
        validation_alias=_aliases("stateName", "StateName", "state_name")
    )


@dataclass(frozen=True)
class Selected:
    """State picked from the known list by identifier."""

    id: int


@dataclass(frozen=True)
class FreeText:
    """State typed by name, possibly not yet known to the server."""

    name: str


LookupInput = Selected | FreeText


def parse_lookup_input(raw: str) -> LookupInput:
    """Interpret a raw state token as an identifier or a display name."""
    value = raw.strip()
    if value.isascii() and value.isdigit() and int(value) > 0:
        return Selected(int(value))
    return FreeText(value)


def collect_subjects(rows: list[str]) -> list[str]:
    """Drop blank subject rows, keeping order and repeats."""
    return [row.strip() for row in rows if row and row.strip()]


@dataclass
class RecordForm:
    """Raw operator input for one student record."""

    name: str = ""
    age: str = ""
    dob: str = ""
    address: str = ""
    phone: str = ""
    state: LookupInput | None = None
    subjects: list[str] = field(default_factory=list)
    photos: list[FileHandle] = field(default_factory=list)


@dataclass(frozen=True)
class RecordDraft:
    """Validated record body ready to be written."""

    name: str
    age: int
    dob: date
    address: str
    phone: str
    state_id: int
    subjects: list[str]

    def to_payload(self) -> dict[str, object]:
        """Serialize to the API request body."""
        return {
            "Name": self.name,
            "Age": self.age,
            "Dob": self.dob.isoformat(),
            "Address": self.address,
            "StateId": self.state_id,
            "Phone": self.phone,
            "Subjects": list(self.subjects),
        }


def form_from_record(record: StudentRecord) -> RecordForm:
    """Prefill an edit form from a loaded record."""
    state: LookupInput | None = None
    if record.state_id is not None:
        state = Selected(record.state_id)
    elif record.state_name:
        state = FreeText(record.state_name)
    return RecordForm(
        name=record.name,
        age=str(record.age) if record.age is not None else "",
        dob=record.dob.isoformat() if record.dob else "",
        address=record.address,
        phone=record.phone,
        state=state,
        subjects=list(record.subjects),
    )
