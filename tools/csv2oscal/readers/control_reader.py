"""
Control reader for tabular control exports

Reads CSV or Excel control listings and converts them to CIR rows. The first
row is a header and is skipped; each following row carries, by position,
control acronym, component name and control description. Cell text is passed
through unchanged.
"""

import csv
import logging
import zipfile
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pandas as pd
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from ..exceptions import SourceUnavailable
from .base_reader import BaseReader

logger = logging.getLogger(__name__)

Rows = Tuple[List[Tuple[str, ...]], List[int]]


class ControlReader(BaseReader):
    """Reader for control listings in CSV or Excel format"""

    CSV_SUFFIXES = ['.csv']
    EXCEL_SUFFIXES = ['.xlsx', '.xlsm']

    SHEET_KEYWORDS = ['control', 'component']

    def __init__(self, file_path: Path):
        super().__init__(file_path)
        self.source_type = self._detect_source_type()
        self.sheet_name = None

    def _detect_source_type(self) -> str:
        suffix = self.file_path.suffix.lower()
        if suffix in self.CSV_SUFFIXES:
            return "csv"
        if suffix in self.EXCEL_SUFFIXES:
            return "xlsx"
        raise SourceUnavailable(
            f"Unsupported input type '{suffix or self.file_path.name}'. "
            f"Expected one of: {', '.join(self.CSV_SUFFIXES + self.EXCEL_SUFFIXES)}"
        )

    def to_cir(self) -> Dict[str, Any]:
        """Convert control listing to CIR format"""
        logger.info(f"Reading control rows from: {self.file_path}")

        if self.source_type == "csv":
            rows, line_numbers = self._read_csv()
        else:
            rows, line_numbers = self._read_excel()

        logger.info(f"Read {len(rows)} control rows")

        metadata = self._create_base_metadata(self.source_type, row_count=len(rows))
        if self.sheet_name:
            metadata["sheet_name"] = self.sheet_name

        return {
            "metadata": metadata,
            "rows": rows,
            "line_numbers": line_numbers
        }

    def _read_csv(self) -> Rows:
        """Read CSV records keeping each record's own width"""
        rows = []
        line_numbers = []

        try:
            with open(self.file_path, 'r', encoding='utf-8-sig', newline='') as f:
                reader = csv.reader(f)
                header = None
                record_start = 1

                for record in reader:
                    start, record_start = record_start, reader.line_num + 1

                    # Blank lines carry no record
                    if not record:
                        continue

                    if header is None:
                        header = record
                        continue

                    rows.append(tuple(record))
                    line_numbers.append(start)
        except (csv.Error, UnicodeDecodeError, OSError) as e:
            raise SourceUnavailable(f"Failed to read {self.file_path}: {e}") from e

        if header is None:
            raise SourceUnavailable(f"No header row found in {self.file_path}")

        return rows, line_numbers

    def _read_excel(self) -> Rows:
        try:
            workbook = load_workbook(self.file_path, read_only=True, data_only=True)
            try:
                self.sheet_name = self._find_control_sheet(workbook.sheetnames)
            finally:
                workbook.close()

            if not self.sheet_name:
                raise SourceUnavailable(f"No worksheet found in {self.file_path}")

            df = pd.read_excel(
                self.file_path,
                sheet_name=self.sheet_name,
                dtype=str,
                keep_default_na=False,
                na_values=[""]
            )
        except (InvalidFileException, zipfile.BadZipFile, KeyError, ValueError, OSError) as e:
            raise SourceUnavailable(f"Failed to read {self.file_path}: {e}") from e

        if len(df.columns) == 0:
            raise SourceUnavailable(f"No header row found in {self.file_path}")

        return self._process_sheet_rows(df)

    def _find_control_sheet(self, sheet_names: List[str]) -> Optional[str]:
        """Find the control sheet in the workbook"""
        for sheet_name in sheet_names:
            sheet_lower = sheet_name.lower()
            if any(keyword in sheet_lower for keyword in self.SHEET_KEYWORDS):
                return sheet_name

        # Fallback to first sheet
        if sheet_names:
            logger.debug(f"No control sheet found, using first sheet: {sheet_names[0]}")
            return sheet_names[0]

        return None

    def _process_sheet_rows(self, df: pd.DataFrame) -> Rows:
        """Convert worksheet rows to positional string tuples"""
        rows = []
        line_numbers = []

        for position, values in enumerate(df.itertuples(index=False, name=None)):
            fields = self._sheet_row_fields(values)

            # Skip empty rows
            if not fields:
                continue

            rows.append(fields)
            line_numbers.append(position + 2)  # 1-indexed, plus header row

        return rows, line_numbers

    def _sheet_row_fields(self, values: Iterable[Any]) -> Tuple[str, ...]:
        """Worksheets have no row width, so trailing empty cells are not fields"""
        cells = list(values)
        while cells and pd.isna(cells[-1]):
            cells.pop()

        return tuple("" if pd.isna(cell) else str(cell) for cell in cells)
