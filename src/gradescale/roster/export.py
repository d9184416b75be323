"""CSV export of the roster."""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable
from pathlib import Path

from gradescale.logging import get_logger
from gradescale.roster.models import StudentRecord

logger = get_logger(__name__)

CSV_HEADER = (
    "Nombre",
    "Asignatura",
    "Promedio",
    "Escala de Apreciación",
    "Fecha de Registro",
)
MISSING_DATE = "No especificada"
DEFAULT_EXPORT_FILENAME = "estudiantes.csv"


def _row(record: StudentRecord) -> tuple[str, ...]:
    return (
        record.name,
        record.subject,
        f"{record.grade:.1f}",
        record.label.value,
        record.created_at or MISSING_DATE,
    )


def to_csv(records: Iterable[StudentRecord]) -> str:
    """Render records as CSV text.

    Every field is quoted and embedded quotes are doubled. Rows are separated
    by a single newline, with no newline after the last row.

    Args:
        records: Records in the order they should appear.

    Returns:
        The header line followed by one line per record.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    writer.writerows(_row(record) for record in records)
    return buffer.getvalue().removesuffix("\n")


def write_csv(
    records: Iterable[StudentRecord],
    path: str | Path = DEFAULT_EXPORT_FILENAME,
) -> Path:
    """Write the CSV export to a UTF-8 file and return its path."""
    path = Path(path)
    path.write_text(to_csv(records), encoding="utf-8", newline="")
    logger.info("Exported roster to %s", path)
    return path
