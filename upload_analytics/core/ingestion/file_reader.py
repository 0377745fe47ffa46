# core/ingestion/file_reader.py

import io
import logging
import time
from typing import Any, Dict, List, Optional

import pandas as pd

from upload_analytics.config.settings import settings
from upload_analytics.core.exceptions import (
    EmptyTableError,
    FileTooLargeError,
    IngestionError,
    UnsupportedFileTypeError,
)
from upload_analytics.core.ingestion.table import Table
from upload_analytics.utils.logging_config import log_ingestion

logger = logging.getLogger(__name__)


class FileIngestionService:
    """
    Validates an uploaded CSV/Excel file and decodes it into a Table.

    Cells are read as raw strings so typing happens in one place, the
    cell parser, whatever the file format.
    """

    CSV_ENCODINGS = ['utf-8-sig', 'cp1252', 'latin-1']

    def __init__(self, max_size_bytes: Optional[int] = None,
                 allowed_extensions: Optional[List[str]] = None):
        self.max_size_bytes = max_size_bytes or settings.max_upload_bytes
        self.allowed_extensions = [
            ext.lower() for ext in (allowed_extensions or settings.ALLOWED_EXTENSIONS)
        ]

    def is_valid_file_type(self, filename: str) -> bool:
        return any(filename.lower().endswith(ext) for ext in self.allowed_extensions)

    def validate(self, filename: str, size: int) -> None:
        """
        Check type and size before any decoding happens
        """
        if not filename or not self.is_valid_file_type(filename):
            raise UnsupportedFileTypeError(
                "Please upload a valid CSV or Excel file",
                {"filename": filename, "allowed": self.allowed_extensions}
            )

        if size > self.max_size_bytes:
            limit_mb = self.max_size_bytes // (1024 * 1024)
            raise FileTooLargeError(
                f"File size too large. Please upload files smaller than {limit_mb}MB",
                {"filename": filename, "size": size, "limit": self.max_size_bytes}
            )

        if size == 0:
            raise EmptyTableError("No data found in the file", {"filename": filename})

    def ingest(self, filename: str, content: bytes) -> Table:
        """
        Decode file content into a validated, non-empty Table
        """
        start_time = time.perf_counter()

        self.validate(filename, len(content))

        if filename.lower().endswith(".csv"):
            rows = self._read_csv(content, filename)
        else:
            rows = self._read_spreadsheet(content, filename)

        if not rows:
            raise EmptyTableError("No data found in the file", {"filename": filename})

        table = Table.from_records(rows, source_name=filename)
        table.ensure_valid()

        duration_ms = (time.perf_counter() - start_time) * 1000
        log_ingestion(filename, table.record_count, table.column_count, duration_ms)

        return table

    def _read_csv(self, content: bytes, filename: str) -> List[Dict[str, Any]]:
        last_error: Optional[Exception] = None

        for encoding in self.CSV_ENCODINGS:
            try:
                df = pd.read_csv(
                    io.BytesIO(content),
                    dtype=str,
                    keep_default_na=False,
                    skip_blank_lines=True,
                    encoding=encoding,
                )
                return self._frame_to_rows(df)
            except UnicodeDecodeError as e:
                last_error = e
                continue
            except pd.errors.EmptyDataError:
                return []
            except (pd.errors.ParserError, ValueError) as e:
                raise IngestionError(
                    f"Error parsing CSV file: {e}", {"filename": filename}
                ) from e

        raise IngestionError(
            f"Error parsing CSV file: could not decode content ({last_error})",
            {"filename": filename}
        )

    def _read_spreadsheet(self, content: bytes, filename: str) -> List[Dict[str, Any]]:
        # Only the first sheet is analysed
        try:
            df = pd.read_excel(
                io.BytesIO(content),
                sheet_name=0,
                dtype=str,
                keep_default_na=False,
            )
        except Exception as e:
            raise IngestionError(
                f"Error reading Excel file: {e}", {"filename": filename}
            ) from e

        return self._frame_to_rows(df)

    def _frame_to_rows(self, df: pd.DataFrame) -> List[Dict[str, Any]]:
        if df.empty:
            return []

        df = df.astype(object).where(pd.notna(df), None)
        df.columns = [str(column).strip() for column in df.columns]
        return df.to_dict(orient="records")
