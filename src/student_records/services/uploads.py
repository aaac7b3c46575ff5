"""Photo upload pipeline: best-effort compression, one multipart batch."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

from student_records.adapters.student_api_client import StudentApiClient
from student_records.domain.errors import ApiError, UploadFailed
from student_records.domain.uploads import FileHandle, UploadBatch

_logger = logging.getLogger(__name__)


class ImageCompressor(Protocol):
    """Interface for shrinking an image file."""

    async def compress(self, file: FileHandle) -> FileHandle:
        """Return a smaller copy of the file or raise."""


@dataclass
class UploadPipeline:
    """Compresses selected photos and sends them as one request."""

    client: StudentApiClient
    compressor: ImageCompressor

    async def upload(self, record_id: int, files: list[FileHandle]) -> UploadBatch:
        """Upload files for a record; compression failures fall back to originals."""
        batch = await self.prepare(record_id, files)
        if not batch.entries:
            return batch
        try:
            await self.client.upload_photos(record_id, batch.files)
        except ApiError as exc:
            raise UploadFailed(record_id) from exc
        _logger.info(
            "Uploaded %s photos for student %s (%s compressed)",
            len(batch.entries),
            record_id,
            batch.compressed_count,
        )
        return batch

    async def prepare(self, record_id: int, files: list[FileHandle]) -> UploadBatch:
        """Compress every file concurrently and pair it with its original."""
        prepared = await asyncio.gather(*(self._compress_or_keep(f) for f in files))
        return UploadBatch(record_id=record_id, entries=list(zip(files, prepared)))

    async def _compress_or_keep(self, file: FileHandle) -> FileHandle:
        try:
            return await self.compressor.compress(file)
        except Exception as exc:
            _logger.warning("Compression failed for %s: %s", file.filename, exc)
            return file
