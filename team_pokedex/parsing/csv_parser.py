# team_pokedex/parsing/csv_parser.py
import re
from pathlib import Path
from typing import List, Union

from loguru import logger

from team_pokedex.models.team import Row

_LINE_SPLIT_RE = re.compile(r"\r?\n")
COMMENT_PREFIX = "#"


class CsvParseError(Exception):
    """Raised when the team CSV cannot be read."""

    pass


def parse_rows(content: str) -> List[Row]:
    """Parses the two-column ``person,pokemon`` format.

    Blank lines and ``#`` comments are ignored. There is no quoting support,
    so names cannot contain commas. Fields beyond the second are ignored and
    rows missing either field are skipped with a warning.

    Args:
        content: Raw text of the CSV file.

    Returns:
        The usable rows, in file order.
    """
    rows: List[Row] = []
    for line in _LINE_SPLIT_RE.split(content):
        line = line.strip()
        if not line or line.startswith(COMMENT_PREFIX):
            continue

        fields = [value.strip() for value in line.split(",")]
        person = fields[0]
        species = fields[1] if len(fields) > 1 else ""

        if not person or not species:
            logger.warning(f"Skipping incomplete row: {fields}")
            continue

        rows.append(Row(person=person, species_raw_name=species))

    logger.debug(f"Parsed {len(rows)} usable row(s).")
    return rows


def read_rows(path: Union[str, Path]) -> List[Row]:
    """Reads and parses a UTF-8 team CSV file."""
    csv_path = Path(path)
    try:
        content = csv_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise CsvParseError(f"Cannot read {csv_path}: {e}") from e
    return parse_rows(content)
