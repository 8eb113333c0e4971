"""
Bulk ROI Import Service.

CSV-based bulk update of ROI metric records.

Format:
  - first non-blank line is the header; column order is free, extra
    columns are ignored
  - required columns: resourceKey plus <metric>Pre / <metric>Post for each
    of the five ROI metrics
  - each later non-blank line is one resource

Header problems reject the whole file. Row problems are tolerated: short
rows and rows without a resource key are skipped, and unreadable numbers
become 0. Nothing is written unless at least one row survives, and then
every surviving row is written in a single registry update.

Features:
  - Parse & validate (dry run) without touching the registry
  - Import with a feedback message for the UI
  - Template CSV generation from the current resources
"""

from __future__ import annotations

import csv
import io
import logging
import math
from dataclasses import dataclass, field

from systems_hub.models.roi import (
    ROI_METRIC_KEYS,
    ImportRow,
    RoiMetricRecord,
    RoiMetricValue,
    RoiUpdate,
)

logger = logging.getLogger(__name__)

RESOURCE_KEY_COLUMN = "resourceKey"

MSG_UNREADABLE = "Unable to read file contents."
MSG_NO_DATA = "No data rows found in the import file."
MSG_NO_VALID_ROWS = "No valid rows found to import."


class RoiImportError(Exception):
    """Structural import error. The registry is never touched when raised."""

    def __init__(self, message, missing_headers=None):
        self.message = message
        self.missing_headers = list(missing_headers or [])
        super().__init__(message)


@dataclass(frozen=True)
class ImportResult:
    """Outcome of a parse, validate or import pass, ready for the UI."""

    ok: bool
    message: str
    imported: int = 0
    skipped: int = 0
    missing_headers: tuple[str, ...] = ()
    rows: tuple[ImportRow, ...] = field(default=(), repr=False)

    @property
    def tone(self) -> str:
        return "success" if self.ok else "error"

    def to_dict(self) -> dict:
        data = {
            "status": "ok" if self.ok else "error",
            "tone": self.tone,
            "message": self.message,
            "imported": self.imported,
            "skipped": self.skipped,
        }
        if self.missing_headers:
            data["missingHeaders"] = list(self.missing_headers)
        return data


def metric_columns() -> list[str]:
    columns = []
    for key in ROI_METRIC_KEYS:
        columns.append(f"{key.value}Pre")
        columns.append(f"{key.value}Post")
    return columns


REQUIRED_HEADERS: tuple[str, ...] = (RESOURCE_KEY_COLUMN, *metric_columns())


# ═══════════════════════════════════════════════════════════════
# CSV Template
# ═══════════════════════════════════════════════════════════════

def generate_csv_template(records: dict[str, RoiMetricRecord] | None = None,
                          limit: int = 3) -> str:
    """Header line plus up to ``limit`` example rows from existing records.

    With no records the example rows are zero-filled placeholders.
    """
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(REQUIRED_HEADERS)

    items = list((records or {}).items())[:limit]
    if not items:
        items = [("tool-<id>", RoiMetricRecord.zero()), ("system-<id>", RoiMetricRecord.zero())]
    for key, record in items:
        row = [key]
        for metric in ROI_METRIC_KEYS:
            value = record.metric(metric)
            row.extend([_plain(value.pre), _plain(value.post)])
        writer.writerow(row)
    return output.getvalue()


def _plain(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


# ═══════════════════════════════════════════════════════════════
# CSV Parsing & Validation
# ═══════════════════════════════════════════════════════════════

def _decode(file_content: str | bytes | None) -> str:
    if file_content is None:
        return ""
    if isinstance(file_content, bytes):
        try:
            return file_content.decode("utf-8-sig")  # Handle BOM
        except UnicodeDecodeError as exc:
            raise RoiImportError(MSG_UNREADABLE) from exc
    return file_content.lstrip("\ufeff")


def _coerce(raw: str | None) -> float:
    """Numeric cell → float. Empty, non-numeric, NaN or infinite → 0."""
    try:
        value = float((raw or "").strip())
    except ValueError:
        return 0
    return value if math.isfinite(value) else 0


def _split_line(line: str) -> list[str]:
    """One line's fields. A stray quote never reaches past its own line."""
    return next(csv.reader([line]), [])


def parse_roi_csv(file_content: str | bytes | None) -> tuple[list[ImportRow], int]:
    """
    Parse CSV content into ImportRows.
    Returns (rows, skipped_count).

    Raises RoiImportError for structural problems: unreadable/empty input,
    no data rows, or missing required headers.
    """
    text = _decode(file_content)
    if not text.strip():
        raise RoiImportError(MSG_UNREADABLE)

    lines = [line for line in text.splitlines() if line.strip()]
    if len(lines) < 2:
        raise RoiImportError(MSG_NO_DATA)

    header = [h.strip() for h in _split_line(lines[0])]
    missing = [name for name in REQUIRED_HEADERS if name not in header]
    if missing:
        raise RoiImportError(
            f"Missing required columns: {', '.join(missing)}.", missing_headers=missing)

    position = {name: header.index(name) for name in REQUIRED_HEADERS}
    rows: list[ImportRow] = []
    skipped = 0
    for line_number, line in enumerate(lines[1:], start=2):
        fields = _split_line(line)
        if len(fields) < len(header):
            skipped += 1
            continue
        resource_key = fields[position[RESOURCE_KEY_COLUMN]].strip()
        if not resource_key:
            skipped += 1
            continue
        metrics = {
            key: RoiMetricValue(
                pre=_coerce(fields[position[f"{key.value}Pre"]]),
                post=_coerce(fields[position[f"{key.value}Post"]]),
            )
            for key in ROI_METRIC_KEYS
        }
        rows.append(ImportRow(
            resource_key=resource_key,
            metrics=RoiMetricRecord.from_metrics(metrics),
            line_number=line_number,
        ))

    if not rows:
        raise RoiImportError(MSG_NO_VALID_ROWS)
    return rows, skipped


def imported_message(count: int) -> str:
    noun = "resource" if count == 1 else "resources"
    return f"Imported ROI metrics for {count} {noun}."


def validate_roi_csv(file_content: str | bytes | None) -> ImportResult:
    """Dry run: parse and report, never write."""
    try:
        rows, skipped = parse_roi_csv(file_content)
    except RoiImportError as exc:
        return ImportResult(ok=False, message=exc.message,
                            missing_headers=tuple(exc.missing_headers))
    return ImportResult(
        ok=True,
        message=f"{len(rows)} row(s) ready to import.",
        imported=0,
        skipped=skipped,
        rows=tuple(rows),
    )


def import_roi_csv(file_content: str | bytes | None, registry) -> ImportResult:
    """Parse ``file_content`` and apply every surviving row to ``registry``.

    ``registry`` is anything with a ``bulk_update(updates)`` method. A
    structural error leaves it untouched.
    """
    try:
        rows, skipped = parse_roi_csv(file_content)
    except RoiImportError as exc:
        logger.info("ROI import rejected: %s", exc.message)
        return ImportResult(ok=False, message=exc.message,
                            missing_headers=tuple(exc.missing_headers))

    registry.bulk_update(RoiUpdate(row.resource_key, row.metrics) for row in rows)
    logger.info("ROI import applied: %d row(s), %d skipped", len(rows), skipped,
                extra={"imported": len(rows), "skipped": skipped})
    return ImportResult(
        ok=True,
        message=imported_message(len(rows)),
        imported=len(rows),
        skipped=skipped,
        rows=tuple(rows),
    )
