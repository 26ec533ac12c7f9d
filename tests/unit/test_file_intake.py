from pathlib import Path
from unittest.mock import AsyncMock, patch

import anyio
import pytest

from deepscan.intake.exceptions import (
    EmptyFileError,
    FileTooLargeError,
    MissingFileError,
    UnsupportedFileTypeError,
)
from deepscan.intake.file_intake import FileIntake, generated_file_name
from deepscan.intake.models import UploadedFile
from tests.helpers import FakeClock, make_upload

pytestmark = pytest.mark.anyio


def _make_intake(upload_dir: Path, max_bytes: int = 1024 * 1024) -> FileIntake:
    return FileIntake(upload_dir, max_bytes, clock=FakeClock())


class TestGeneratedFileName:
    def test_keeps_lowercased_extension(self) -> None:
        name = generated_file_name("Holiday.JPG", 1000.5)
        assert name.startswith("1000500-")
        assert name.endswith(".jpg")

    def test_drops_unsafe_extension(self) -> None:
        name = generated_file_name("clip.m p4", 1.0)
        assert "." not in name

    def test_ignores_directories_in_original_name(self) -> None:
        name = generated_file_name("../../etc/passwd.png", 1.0)
        assert "/" not in name
        assert name.endswith(".png")

    def test_names_differ_at_same_timestamp(self) -> None:
        names = {generated_file_name("a.jpg", 42.0) for _ in range(20)}
        assert len(names) > 1


class TestSave:
    async def test_persists_file(self, upload_dir: Path, jpeg_bytes: bytes) -> None:
        intake = _make_intake(upload_dir)

        uploaded = await intake.save(make_upload(jpeg_bytes))

        assert uploaded.path.parent == upload_dir
        assert uploaded.path.read_bytes() == jpeg_bytes
        assert uploaded.size_bytes == len(jpeg_bytes)
        assert uploaded.mime_type == "image/jpeg"
        assert uploaded.original_name == "photo.jpg"
        assert uploaded.category == "image"

    async def test_creates_upload_dir(self, upload_dir: Path, jpeg_bytes: bytes) -> None:
        assert not upload_dir.exists()
        intake = _make_intake(upload_dir)

        await intake.save(make_upload(jpeg_bytes))

        assert upload_dir.is_dir()

    async def test_strips_content_type_parameters(self, upload_dir: Path) -> None:
        intake = _make_intake(upload_dir)

        uploaded = await intake.save(
            make_upload(b"RIFF", filename="a.wav", content_type="audio/wav; codecs=1")
        )

        assert uploaded.mime_type == "audio/wav"

    async def test_missing_file_raises(self, upload_dir: Path) -> None:
        intake = _make_intake(upload_dir)

        with pytest.raises(MissingFileError, match="No file uploaded"):
            await intake.save(None)

    async def test_unsupported_type_raises_before_writing(self, upload_dir: Path) -> None:
        intake = _make_intake(upload_dir)

        with pytest.raises(UnsupportedFileTypeError, match="application/pdf"):
            await intake.save(
                make_upload(b"%PDF-1.4", filename="doc.pdf", content_type="application/pdf")
            )

        assert not upload_dir.exists()

    async def test_empty_file_raises_and_leaves_nothing(self, upload_dir: Path) -> None:
        intake = _make_intake(upload_dir)

        with pytest.raises(EmptyFileError):
            await intake.save(make_upload(b""))

        assert list(upload_dir.iterdir()) == []

    async def test_oversized_file_raises_and_leaves_nothing(self, upload_dir: Path) -> None:
        intake = _make_intake(upload_dir, max_bytes=100)

        with pytest.raises(FileTooLargeError):
            await intake.save(make_upload(b"x" * 101))

        assert list(upload_dir.iterdir()) == []

    def test_oversized_error_is_413(self) -> None:
        assert FileTooLargeError.status_code == 413
        assert UnsupportedFileTypeError.status_code == 400


class TestDiscard:
    async def test_deletes_file(self, upload_dir: Path, jpeg_bytes: bytes) -> None:
        intake = _make_intake(upload_dir)
        uploaded = await intake.save(make_upload(jpeg_bytes))

        await intake.discard(uploaded)

        assert not uploaded.path.exists()

    async def test_missing_file_is_not_an_error(self, tmp_path: Path) -> None:
        intake = _make_intake(tmp_path)
        ghost = UploadedFile(
            path=tmp_path / "gone.jpg",
            mime_type="image/jpeg",
            size_bytes=1,
            original_name="gone.jpg",
        )

        await intake.discard(ghost)

    async def test_delete_failure_is_logged_not_raised(self, tmp_path: Path) -> None:
        intake = _make_intake(tmp_path)
        uploaded = UploadedFile(
            path=tmp_path / "locked.jpg",
            mime_type="image/jpeg",
            size_bytes=1,
            original_name="locked.jpg",
        )

        with (
            patch.object(anyio.Path, "unlink", AsyncMock(side_effect=PermissionError("denied"))),
            patch("deepscan.intake.file_intake.Log") as log,
        ):
            await intake.discard(uploaded)

        log.error.assert_called_once()
        assert "denied" in log.error.call_args.args[0]
