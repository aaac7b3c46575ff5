"""Models for photo uploads."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class FileHandle:
    """A locally selected file held in memory."""

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass
class UploadBatch:
    """Original files paired with the blobs that will be sent."""

    record_id: int
    entries: list[tuple[FileHandle, FileHandle]] = field(default_factory=list)

    @property
    def files(self) -> list[FileHandle]:
        return [prepared for _, prepared in self.entries]

    @property
    def compressed_count(self) -> int:
        return sum(1 for original, prepared in self.entries if prepared is not original)
