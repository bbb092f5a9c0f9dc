"""Reader for vocabulary exported as CSV (one word per row)."""

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

logger = logging.getLogger(__name__)

CHINESE_COLUMN = "Chinese"
PINYIN_COLUMN = "Pinyin"
MEANING_COLUMNS = ("English Meaning", "Meaning")
IMAGE_COLUMN = "Files & media"
AGGREGATE_SUFFIX = "_all.csv"


@dataclass
class CsvVocabularyFile:
    """Rows read from one CSV file, shaped like batch import records."""

    path: Path
    records: List[Dict[str, str]] = field(default_factory=list)
    skipped_rows: int = 0


class CsvVocabularyReader:
    """Parses vocabulary CSV files with a header row.

    Header cells are trimmed and stripped of a UTF-8 BOM. A ``Chinese``
    column is mandatory; rows with empty Chinese text are skipped.
    """

    def read_file(self, path: Path) -> CsvVocabularyFile:
        """Read one CSV file.

        Raises:
            ValueError: If the file has no header or no Chinese column.
            OSError: If the file cannot be read.
            csv.Error: If the file is not well-formed CSV.
        """
        path = Path(path)
        with path.open(newline="", encoding="utf-8-sig") as handle:
            reader = csv.reader(handle)
            try:
                header = next(reader)
            except StopIteration:
                raise ValueError(f"Empty CSV file: {path}") from None

            columns = {_clean_header(name): index for index, name in enumerate(header)}
            if CHINESE_COLUMN not in columns:
                raise ValueError(f"Missing '{CHINESE_COLUMN}' column in {path.name}")

            result = CsvVocabularyFile(path=path)
            for row in reader:
                chinese = _cell(row, columns, CHINESE_COLUMN)
                if not chinese:
                    result.skipped_rows += 1
                    continue
                result.records.append({
                    "chinese": chinese,
                    "pinyin": _cell(row, columns, PINYIN_COLUMN),
                    "meaning": _meaning(row, columns),
                    "image_url": _cell(row, columns, IMAGE_COLUMN),
                })
        return result

    def list_files(self, directory: Path) -> List[Path]:
        """CSV files in ``directory``, skipping ``*_all.csv`` aggregates."""
        directory = Path(directory)
        if not directory.is_dir():
            raise ValueError(f"Not a directory: {directory}")
        return sorted(
            p for p in directory.iterdir()
            if p.is_file() and p.suffix.lower() == ".csv" and not p.name.endswith(AGGREGATE_SUFFIX)
        )


def _clean_header(name: str) -> str:
    return name.replace("\ufeff", "").strip()


def _cell(row: List[str], columns: Dict[str, int], name: str) -> str:
    index = columns.get(name)
    if index is None or index >= len(row):
        return ""
    return row[index].strip()


def _meaning(row: List[str], columns: Dict[str, int]) -> str:
    for name in MEANING_COLUMNS:
        if name in columns:
            return _cell(row, columns, name)
    return ""
