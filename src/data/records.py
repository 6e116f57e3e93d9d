"""Video record loading from the reviewer's CSV export"""

import re
from pathlib import Path
from typing import Dict, List, Union

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field


# Header names are a contract with whoever produces the CSV
FILE_NAME_COLUMN = 'FileName'
BOW_NUMBER_COLUMN = 'BOWNumber'
COMMENT_COLUMN = 'Comment'
REQUIRED_COLUMNS = [FILE_NAME_COLUMN, BOW_NUMBER_COLUMN, COMMENT_COLUMN]

_FIELD_SPLIT = re.compile(r'\t|,')


class RecordSchemaError(ValueError):
    """Raised when the CSV header lacks a required column"""


class VideoRecord(BaseModel):
    """One video to adjudicate, built from one CSV row"""
    model_config = ConfigDict(frozen=True)

    file_name: str = Field(min_length=1)
    bow_number: str = ''
    comment: str = ''
    row_number: int = 0
    extra: Dict[str, str] = Field(default_factory=dict)

    @property
    def has_bow_number(self) -> bool:
        return bool(self.bow_number.strip())


def read_csv_rows(path: Union[str, Path]) -> List[Dict[str, str]]:
    """
    Read a comma- or tab-delimited file into one dict per data row

    Blank lines are ignored, the first remaining line is the header, and
    missing trailing values become empty strings.

    Args:
        path: CSV/TSV file path

    Returns:
        Rows in file order; [] if the file cannot be read
    """
    try:
        text = Path(path).read_text(encoding='utf-8-sig')
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Error reading CSV {path}: {e}")
        return []

    lines = [line for line in text.split('\n') if line.strip()]
    if not lines:
        return []

    headers = [header.strip() for header in _FIELD_SPLIT.split(lines[0])]
    rows = []
    for line in lines[1:]:
        values = _FIELD_SPLIT.split(line)
        row = {}
        for index, header in enumerate(headers):
            row[header] = values[index].strip() if index < len(values) else ''
        rows.append(row)

    return rows


def load_video_records(path: Union[str, Path]) -> List[VideoRecord]:
    """
    Load typed video records from the CSV file

    Args:
        path: CSV/TSV file with FileName, BOWNumber and Comment columns

    Returns:
        Records in file order; [] if the file cannot be read or has no data rows

    Raises:
        RecordSchemaError: header is missing a required column
    """
    rows = read_csv_rows(path)
    if not rows:
        return []

    missing = [column for column in REQUIRED_COLUMNS if column not in rows[0]]
    if missing:
        raise RecordSchemaError(
            f"{path} is missing required column(s) {missing}; found {list(rows[0].keys())}"
        )

    records = []
    for row_number, row in enumerate(rows, start=1):
        if not row[FILE_NAME_COLUMN]:
            logger.warning(f"Row {row_number}: empty {FILE_NAME_COLUMN}, skipping")
            continue

        records.append(VideoRecord(
            file_name=row[FILE_NAME_COLUMN],
            bow_number=row[BOW_NUMBER_COLUMN],
            comment=row[COMMENT_COLUMN],
            row_number=row_number,
            extra={k: v for k, v in row.items() if k not in REQUIRED_COLUMNS},
        ))

    logger.info(f"Loaded {len(records)} video records from {path}")
    return records
