"""Dataset ingestion: text file → ``Platform`` records.

File format is one platform per line::

    Yandex.Direct:/ru
    Revda Worker:/ru/svrd/revda,/ru/svrd/pervik

Invalid lines are logged and skipped; a file that yields no valid record at
all is a failed load. Nothing here touches the index, so a failure or a
cancellation at any point leaves the published state alone.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from adplatforms.errors import AdPlatformsError, ErrorCode
from adplatforms.models.platform import Platform

if TYPE_CHECKING:
    from adplatforms.config import IngestSettings

log = structlog.get_logger()

# What a "replace" decoder substitutes for bytes it cannot decode
_REPLACEMENT_CHAR = "\ufffd"


@dataclass
class ParseReport:
    platforms: list[Platform] = field(default_factory=list)
    valid_lines: int = 0
    invalid_lines: int = 0


def _invalid_record(line_number: int, detail: str) -> AdPlatformsError:
    return AdPlatformsError(
        code=ErrorCode.INVALID_RECORD,
        message=f"Line {line_number}: {detail}",
        suggestion="Expected 'Name:/location1,/location2'.",
    )


def _invalid_file(message: str, suggestion: str = "") -> AdPlatformsError:
    return AdPlatformsError(code=ErrorCode.INVALID_FILE, message=message, suggestion=suggestion)


def validate_upload(path: Path, settings: IngestSettings) -> None:
    """Check extension and size before reading anything."""
    if not path.is_file():
        raise _invalid_file(f"File not found: {path}")

    allowed = {ext.lower() for ext in settings.allowed_extensions}
    if path.suffix.lower() not in allowed:
        raise _invalid_file(
            f"Unsupported file type: {path.name!r}",
            suggestion=f"Allowed extensions: {', '.join(sorted(allowed))}.",
        )

    size = path.stat().st_size
    if size == 0:
        raise _invalid_file(f"File is empty: {path.name!r}")
    if size > settings.max_file_bytes:
        raise _invalid_file(
            f"File is too large: {size} bytes (limit {settings.max_file_bytes})",
        )


def parse_line(line: str, line_number: int) -> Platform:
    """Parse one ``Name:/loc1,/loc2`` record. Raises INVALID_RECORD on bad input."""
    if _REPLACEMENT_CHAR in line:
        raise _invalid_record(line_number, "line contains undecodable bytes")

    name, sep, locations_part = line.partition(":")
    if not sep:
        raise _invalid_record(line_number, "missing ':' separator")

    name = name.strip()
    if not name:
        raise _invalid_record(line_number, "platform name is empty")

    paths = [part.strip() for part in locations_part.split(",")]
    paths = [p for p in paths if p]
    if not paths:
        raise _invalid_record(line_number, "no locations given")

    try:
        return Platform(name=name, locations=paths)
    except ValidationError as exc:
        first = exc.errors()[0]
        raise _invalid_record(line_number, first["msg"]) from exc


def parse_lines(lines: Iterable[str], cancel: threading.Event | None = None) -> ParseReport:
    """Parse every non-blank line, collecting valid records and counting failures."""
    report = ParseReport()
    for line_number, line in enumerate(lines, start=1):
        if cancel is not None and cancel.is_set():
            log.info("ingest_cancelled", line_number=line_number)
            raise AdPlatformsError(
                code=ErrorCode.LOAD_CANCELLED,
                message="Load was cancelled before completion.",
                recoverable=True,
            )
        if not line.strip():
            continue
        try:
            report.platforms.append(parse_line(line, line_number))
        except AdPlatformsError as exc:
            log.warning("invalid_record", line_number=line_number, reason=exc.message)
            report.invalid_lines += 1
        else:
            report.valid_lines += 1
    return report


def read_platform_file(
    path: str | Path,
    settings: IngestSettings,
    cancel: threading.Event | None = None,
) -> ParseReport:
    """Validate, read and parse a dataset file.

    Raises ``AdPlatformsError`` with INVALID_FILE, FILE_READ_FAILED,
    LOAD_CANCELLED, or EMPTY_DATASET when no line was usable.
    """
    path = Path(path)
    validate_upload(path, settings)
    log.info("ingest_started", file=path.name)

    try:
        with path.open(encoding=settings.encoding, errors=settings.decode_errors) as fh:
            report = parse_lines(fh, cancel=cancel)
    except (OSError, UnicodeDecodeError) as exc:
        log.error("ingest_read_error", file=path.name, exc_info=True)
        raise AdPlatformsError(
            code=ErrorCode.FILE_READ_FAILED,
            message=f"Could not read {path.name!r}: {exc}",
            recoverable=True,
        ) from exc

    if not report.platforms:
        raise AdPlatformsError(
            code=ErrorCode.EMPTY_DATASET,
            message=f"{path.name!r} contains no valid platform records.",
            suggestion="Expected lines of the form 'Name:/location1,/location2'.",
        )

    log.info(
        "ingest_complete",
        file=path.name,
        valid_lines=report.valid_lines,
        invalid_lines=report.invalid_lines,
    )
    return report
