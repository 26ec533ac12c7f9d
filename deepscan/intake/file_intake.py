import re
import secrets
import time
from collections.abc import Callable
from pathlib import Path

import anyio
from starlette.datastructures import UploadFile

from deepscan.intake.exceptions import (
    EmptyFileError,
    FileTooLargeError,
    MissingFileError,
    UnsupportedFileTypeError,
)
from deepscan.intake.models import UploadedFile, get_file_category
from deepscan.logging.logger import Log

_SAFE_SUFFIX = re.compile(r"\.[a-z0-9]{1,10}")


def generated_file_name(original_name: str, now: float) -> str:
    """Build a collision-resistant name: {ms timestamp}-{random}{extension}"""
    suffix = Path(original_name).suffix.lower()
    if not _SAFE_SUFFIX.fullmatch(suffix):
        suffix = ""
    return f"{int(now * 1000)}-{secrets.randbelow(10**9)}{suffix}"


class FileIntake:
    """Validates a single uploaded file and persists it to transient storage."""

    CHUNK_SIZE = 1024 * 1024

    def __init__(
        self,
        upload_dir: Path,
        max_bytes: int,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._upload_dir = upload_dir
        self._max_bytes = max_bytes
        self._clock = clock

    async def save(self, upload: UploadFile | None) -> UploadedFile:
        """Validate the upload and stream it to the uploads directory.

        Raises:
            MissingFileError: if no file was sent.
            UnsupportedFileTypeError: if the MIME type is not allowlisted.
            FileTooLargeError: if the file exceeds the configured ceiling.
            EmptyFileError: if the file has no content.
        """
        if upload is None or not upload.filename:
            raise MissingFileError("No file uploaded")

        mime_type = self._normalize_mime_type(upload.content_type)
        if get_file_category(mime_type) == "unsupported":
            raise UnsupportedFileTypeError(
                f"Unsupported file type: {mime_type or 'unknown'}"
            )

        await anyio.Path(self._upload_dir).mkdir(parents=True, exist_ok=True)
        path = self._upload_dir / generated_file_name(upload.filename, self._clock())
        size = await self._write(upload, path)
        if size == 0:
            await anyio.Path(path).unlink(missing_ok=True)
            raise EmptyFileError("Uploaded file is empty")

        Log.info(f"Stored upload '{upload.filename}' ({mime_type}, {size} bytes) at {path}")
        return UploadedFile(
            path=path,
            mime_type=mime_type,
            size_bytes=size,
            original_name=upload.filename,
        )

    async def discard(self, uploaded: UploadedFile) -> None:
        """Delete the transient file. A file that is already gone is not an error."""
        try:
            await anyio.Path(uploaded.path).unlink(missing_ok=True)
        except OSError as exc:
            Log.error(f"Failed to delete upload {uploaded.path}: {exc}")
            return
        Log.debug(f"Deleted upload {uploaded.path}")

    async def _write(self, upload: UploadFile, path: Path) -> int:
        size = 0
        try:
            async with await anyio.open_file(path, "wb") as target:
                while chunk := await upload.read(self.CHUNK_SIZE):
                    size += len(chunk)
                    if size > self._max_bytes:
                        raise FileTooLargeError(
                            f"File exceeds the {self._max_bytes // (1024 * 1024)}MB limit"
                        )
                    await target.write(chunk)
        except BaseException:
            with anyio.CancelScope(shield=True):
                await anyio.Path(path).unlink(missing_ok=True)
            raise
        return size

    @staticmethod
    def _normalize_mime_type(content_type: str | None) -> str:
        if not content_type:
            return ""
        return content_type.split(";", 1)[0].strip().lower()
