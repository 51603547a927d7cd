from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.analysis.exceptions import PollTimeoutError, SubmissionError
from app.analysis.models import JobStatus
from app.main import default_output_path, main, user_message
from app.redaction.exceptions import InvalidDocumentError, JobFailedError
from app.redaction.models import PiiEntity, RedactionResult
from app.storage.exceptions import ObjectNotFoundError


class TestUserMessage:
    def test_invalid_document_keeps_detail(self) -> None:
        message = user_message(InvalidDocumentError("File size exceeds 10MB limit."))
        assert message == "The document was rejected: File size exceeds 10MB limit."

    @pytest.mark.parametrize(
        ("exc", "expected"),
        [
            (PollTimeoutError("job-1", 60), "Document analysis timed out"),
            (JobFailedError("job-1", JobStatus.FAILED), "Document analysis failed"),
            (SubmissionError("x", status=500, body="secret detail"), "Document analysis service error"),
            (ObjectNotFoundError("gone"), "Document storage is unavailable"),
            (RuntimeError("boom"), "An unexpected error occurred"),
        ],
    )
    def test_categories_hide_internal_detail(self, exc: Exception, expected: str) -> None:
        assert user_message(exc) == expected


class TestDefaultOutputPath:
    def test_keeps_extension_for_native_artifact(self) -> None:
        assert default_output_path(Path("/tmp/a/report.pdf"), plain_text=False) == Path(
            "/tmp/a/report.redacted.pdf"
        )

    def test_plain_text_artifact(self) -> None:
        assert default_output_path(Path("form.docx"), plain_text=True) == Path(
            "form.redacted.txt"
        )


class TestMain:
    def test_text_mode_writes_redacted_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setenv("REDACTION_MODE", "text")
        source = tmp_path / "notes.txt"
        source.write_text("Write to john@example.com")

        with patch("app.main.Log"):
            exit_code = main([str(source)])

        assert exit_code == 0
        assert (tmp_path / "notes.redacted.txt").read_text() == "Write to [REDACTED-EMAIL]"
        assert "EMAIL: 1" in capsys.readouterr().out

    def test_failure_prints_category_and_returns_one(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        source = tmp_path / "doc.pdf"
        source.write_bytes(b"%PDF")
        redactor = MagicMock()
        redactor.__aenter__ = AsyncMock(return_value=redactor)
        redactor.__aexit__ = AsyncMock(return_value=None)
        redactor.redact = AsyncMock(side_effect=PollTimeoutError("job-1", 60))

        with patch("app.main.Log"), patch(
            "app.main.RedactorFactory.create", return_value=redactor
        ):
            exit_code = main([str(source)])

        assert exit_code == 1
        assert "Document analysis timed out" in capsys.readouterr().err

    def test_explicit_output_path(self, tmp_path: Path) -> None:
        source = tmp_path / "doc.pdf"
        source.write_bytes(b"%PDF")
        target = tmp_path / "out.pdf"
        result = RedactionResult(
            original_file_name="doc.pdf",
            file_extension=".pdf",
            original_text="",
            redacted_text="",
            file_size_bytes=4,
            redacted_document_bytes=b"%RED",
            detected_entities=[PiiEntity("EMAIL", "a@b.co", 0, 6)],
        )
        redactor = MagicMock()
        redactor.__aenter__ = AsyncMock(return_value=redactor)
        redactor.__aexit__ = AsyncMock(return_value=None)
        redactor.redact = AsyncMock(return_value=result)

        with patch("app.main.Log"), patch(
            "app.main.RedactorFactory.create", return_value=redactor
        ):
            assert main([str(source), "-o", str(target)]) == 0

        assert target.read_bytes() == b"%RED"
