"""Unit tests for CSV export."""

from pathlib import Path

import pytest

from gradescale.roster import StudentRecord, to_csv, write_csv

HEADER = '"Nombre","Asignatura","Promedio","Escala de Apreciación","Fecha de Registro"'


def make_record(**overrides: object) -> StudentRecord:
    fields = {
        "id": "rec-1",
        "name": "Ana",
        "subject": "Arte",
        "grade": 5.0,
        "created_at": "2024-01-01",
    }
    fields.update(overrides)
    return StudentRecord(**fields)


@pytest.mark.unit
class TestToCsv:
    """Tests for to_csv."""

    def test_single_record(self) -> None:
        """Header plus one quoted row, nothing else."""
        expected = HEADER + "\n" + '"Ana","Arte","5.0","Con mejora","2024-01-01"'

        assert to_csv([make_record()]) == expected

    def test_empty_roster_is_header_only(self) -> None:
        assert to_csv([]) == HEADER

    def test_rows_follow_roster_order(self) -> None:
        records = [
            make_record(id="1", name="Zoe", grade=7),
            make_record(id="2", name="Ana", grade=3.9),
        ]

        lines = to_csv(records).split("\n")

        assert lines[1].startswith('"Zoe"')
        assert lines[2] == '"Ana","Arte","3.9","Deficiente","2024-01-01"'

    def test_missing_date(self) -> None:
        line = to_csv([make_record(created_at=None)]).split("\n")[1]

        assert line.endswith('"No especificada"')

    def test_embedded_quotes_doubled(self) -> None:
        line = to_csv([make_record(name='Ana "la Profe"')]).split("\n")[1]

        assert line.startswith('"Ana ""la Profe""",')

    def test_commas_stay_inside_field(self) -> None:
        line = to_csv([make_record(subject="Arte, Música")]).split("\n")[1]

        assert '"Arte, Música"' in line

    def test_no_trailing_newline(self) -> None:
        assert not to_csv([make_record()]).endswith("\n")


@pytest.mark.unit
class TestWriteCsv:
    """Tests for write_csv."""

    def test_writes_utf8_file(self, tmp_path: Path) -> None:
        target = tmp_path / "estudiantes.csv"

        result = write_csv([make_record(subject="Matemáticas")], target)

        assert result == target
        assert target.read_text(encoding="utf-8") == to_csv([make_record(subject="Matemáticas")])
