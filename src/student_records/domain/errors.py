"""Error taxonomy for student record operations."""


class StudentRecordsError(Exception):
    """Base error for failures scoped to one user action."""

    user_message = "Something went wrong"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.user_message)


class ApiError(StudentRecordsError):
    """Non-success response from the student API; status 0 means no response."""

    user_message = "Request failed"

    def __init__(self, status_code: int, detail: str = "") -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"API request failed with status {status_code}")


class AuthExpired(StudentRecordsError):
    """The session credential was rejected or is missing."""

    user_message = "Session expired, please sign in again"


class ValidationFailed(StudentRecordsError):
    """Client-side validation rejected the input before any network call."""

    user_message = "Please fill required fields"

    def __init__(self, fields: list[str], message: str | None = None) -> None:
        self.fields = fields
        super().__init__(message or f"Invalid fields: {', '.join(fields)}")


class ResolutionFailed(StudentRecordsError):
    """The state lookup could not be resolved to an identifier."""

    user_message = "Could not save state"


class RecordWriteFailed(StudentRecordsError):
    """Creating or updating the student record failed."""

    user_message = "Could not save student"


class UploadFailed(StudentRecordsError):
    """The photo batch failed after the record was written."""

    user_message = "Student saved, but photos could not be uploaded"

    def __init__(self, record_id: int, message: str | None = None) -> None:
        self.record_id = record_id
        super().__init__(message)
