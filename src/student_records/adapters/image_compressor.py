"""Pillow-backed photo compression."""

import asyncio
import io
import logging
from dataclasses import dataclass

from PIL import Image, ImageOps

from student_records.domain.uploads import FileHandle

_logger = logging.getLogger(__name__)

_QUALITY_STEPS = (85, 70, 55, 40, 25, 10)
_MIN_EDGE_PX = 16


@dataclass
class PillowImageCompressor:
    """Shrinks images towards a byte budget, off the event loop."""

    max_size_bytes: int = 2048
    max_edge_px: int = 1600

    async def compress(self, file: FileHandle) -> FileHandle:
        """Return a compressed JPEG copy of the file, keeping its name."""
        data = await asyncio.to_thread(self._compress_bytes, file.content)
        return FileHandle(
            filename=file.filename, content=data, content_type="image/jpeg"
        )

    def _compress_bytes(self, content: bytes) -> bytes:
        with Image.open(io.BytesIO(content)) as source:
            image = ImageOps.exif_transpose(source).convert("RGB")
        edge = self.max_edge_px
        image.thumbnail((edge, edge), Image.Resampling.LANCZOS)

        best: bytes | None = None
        while True:
            for quality in _QUALITY_STEPS:
                encoded = _encode_jpeg(image, quality)
                if best is None or len(encoded) < len(best):
                    best = encoded
                if len(encoded) <= self.max_size_bytes:
                    return encoded
            width, height = image.size
            if max(width, height) // 2 < _MIN_EDGE_PX:
                break
            image = image.resize(
                (max(1, width // 2), max(1, height // 2)), Image.Resampling.LANCZOS
            )
        _logger.info(
            "Photo stays above budget: size=%s budget=%s",
            len(best),
            self.max_size_bytes,
        )
        return best


def _encode_jpeg(image: Image.Image, quality: int) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=quality, optimize=True)
    return buffer.getvalue()
