import argparse
import asyncio
import sys
from collections import Counter
from pathlib import Path

from app.analysis.exceptions import AnalysisError, PollTimeoutError
from app.auth.exceptions import CredentialError
from app.config.settings import Settings
from app.extraction.exceptions import ExtractionError
from app.logging.logger import Log
from app.redaction.exceptions import InvalidDocumentError, JobFailedError
from app.redaction.factory import RedactorFactory
from app.redaction.models import RedactionResult
from app.redaction.text_document_redactor import TextDocumentRedactor
from app.storage.exceptions import StorageError
from app.text_redaction.exceptions import TextRedactionError

# Shown to the user; full detail goes to the log only.
ERROR_CATEGORIES: list[tuple[type[BaseException], str]] = [
    (InvalidDocumentError, "The document was rejected"),
    (CredentialError, "Authentication with a backing service failed"),
    (StorageError, "Document storage is unavailable"),
    (PollTimeoutError, "Document analysis timed out"),
    (JobFailedError, "Document analysis failed"),
    (AnalysisError, "Document analysis service error"),
    (ExtractionError, "Text could not be extracted from the document"),
    (TextRedactionError, "Text redaction service error"),
]


def user_message(exc: BaseException) -> str:
    """Opaque user-facing category for *exc*."""
    if isinstance(exc, InvalidDocumentError):
        return f"The document was rejected: {exc}"
    for exc_type, message in ERROR_CATEGORIES:
        if isinstance(exc, exc_type):
            return message
    return "An unexpected error occurred"


def default_output_path(source: Path, plain_text: bool) -> Path:
    suffix = ".txt" if plain_text else source.suffix
    return source.with_name(f"{source.stem}.redacted{suffix}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docredact",
        description="Redact PII from a PDF, DOCX or TXT document.",
    )
    parser.add_argument("file", type=Path, help="Document to redact")
    parser.add_argument("-o", "--output", type=Path, help="Where to write the redacted document")
    return parser


async def run(settings: Settings, source: Path, output: Path | None) -> RedactionResult:
    async with RedactorFactory.create(settings) as redactor:
        with source.open("rb") as stream:
            result = await redactor.redact(stream, source.name)

    target = output or default_output_path(
        source, plain_text=isinstance(redactor, TextDocumentRedactor)
    )
    target.write_bytes(result.redacted_document_bytes)
    Log.info("Wrote redacted document", path=target)
    return result


def main(argv: list[str] | None = None) -> int:
    """Entry point: load settings -> build redactor -> redact one file."""
    args = build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)

    try:
        result = asyncio.run(run(settings, args.file, args.output))
    except Exception as exc:
        Log.error(f"Redaction of {args.file} failed: {exc}")
        print(user_message(exc), file=sys.stderr)
        return 1

    counts = Counter(entity.type for entity in result.detected_entities)
    print(f"Redacted {result.original_file_name} ({result.file_size_bytes:,} bytes)")
    for entity_type, count in sorted(counts.items()):
        print(f"  {entity_type}: {count}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
