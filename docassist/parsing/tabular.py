"""CSV and Excel reading with pandas.

Both readers return plain row records so the normalizer can render a short
JSON preview. CSV cells stay strings; Excel cells keep their workbook type.
"""

import io
import logging
from typing import Any

import pandas as pd
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class TabularParseError(Exception):
    """Raised when a CSV file or workbook cannot be read."""

    pass


class Table(BaseModel):
    """Rows of one CSV file or one workbook sheet.

    Attributes:
        name: Sheet name (empty for CSV files).
        columns: Header names taken from the first row.
        records: All data rows keyed by column name.
    """

    name: str = ""
    columns: list[str] = Field(default_factory=list)
    records: list[dict[str, Any]] = Field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.records)


def _frame_records(frame: pd.DataFrame) -> list[dict[str, Any]]:
    """Convert a frame to records with missing cells as None."""
    frame = frame.set_axis([str(column) for column in frame.columns], axis=1)
    cleaned = frame.astype(object).where(frame.notna(), None)
    return cleaned.to_dict(orient="records")


def _unique_columns(header: list[Any]) -> list[str]:
    """Header names as strings, with repeats suffixed ``.1``, ``.2``, ..."""
    seen: dict[str, int] = {}
    columns: list[str] = []
    for cell in header:
        name = "" if cell is None or pd.isna(cell) else str(cell)
        count = seen.get(name, 0)
        columns.append(f"{name}.{count}" if count else name)
        seen[name] = count + 1
    return columns


def read_csv_table(file_content: bytes) -> Table:
    """Read a CSV file whose first row is the header.

    Parsing is lenient: blank lines are skipped, short rows are padded with
    None, fields beyond the header width are dropped, and undecodable bytes
    become U+FFFD. An empty file yields an empty table.

    Raises:
        TabularParseError: If the content is not parseable CSV.
    """
    options: dict[str, Any] = {
        "header": None,
        "dtype": str,
        "keep_default_na": False,
        "encoding": "utf-8-sig",
        "encoding_errors": "replace",
        "engine": "python",
    }

    try:
        width = pd.read_csv(io.BytesIO(file_content), nrows=1, **options).shape[1]

        def trim_row(row: list[str]) -> list[str]:
            logger.warning(f"CSV row has {len(row)} fields, expected {width}; extra fields dropped")
            return row[:width]

        frame = pd.read_csv(io.BytesIO(file_content), on_bad_lines=trim_row, **options)
    except pd.errors.EmptyDataError:
        return Table()
    except Exception as e:
        raise TabularParseError(f"Failed to read CSV: {e}") from e

    columns = _unique_columns(frame.iloc[0].tolist())
    data = frame.iloc[1:].set_axis(columns, axis=1)
    return Table(columns=columns, records=_frame_records(data))


def read_excel_tables(file_content: bytes) -> list[Table]:
    """Read every sheet of an .xlsx or .xls workbook, in workbook order.

    The workbook format is detected from the bytes. Empty sheets are kept
    and come back with no columns and no records.

    Raises:
        TabularParseError: If the workbook cannot be opened.
    """
    if not file_content:
        raise TabularParseError("Empty file provided")

    try:
        sheets = pd.read_excel(io.BytesIO(file_content), sheet_name=None)
    except Exception as e:
        raise TabularParseError(f"Failed to read workbook: {e}") from e

    tables: list[Table] = []
    for sheet_name, frame in sheets.items():
        frame = frame.dropna(axis=0, how="all").convert_dtypes()
        tables.append(
            Table(
                name=str(sheet_name),
                columns=[str(column) for column in frame.columns],
                records=_frame_records(frame),
            )
        )
        logger.debug(f"Read sheet {sheet_name!r} with {len(frame)} rows")

    return tables
