# core/ingestion/cell_parser.py

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

# Plain decimal literals only: no hex, no "inf"/"nan", no digit separators
NUMBER_PATTERN = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$')
INTEGER_PATTERN = re.compile(r'^[+-]?\d+$')
# Largest magnitude a float holds exactly; bigger integer literals stay floats
MAX_EXACT_INTEGER = 2 ** 53


class CellKind(str, Enum):
    """Kind of a parsed table cell"""
    NUMBER = "number"
    TEXT = "text"
    EMPTY = "empty"


@dataclass(frozen=True)
class CellValue:
    kind: CellKind
    value: Optional[Union[int, float, str]] = None

    @property
    def is_empty(self) -> bool:
        return self.kind == CellKind.EMPTY

    @property
    def is_number(self) -> bool:
        return self.kind == CellKind.NUMBER

    def to_python(self) -> Optional[Union[int, float, str]]:
        """Plain JSON-friendly value; empty cells become None"""
        return self.value


EMPTY_CELL = CellValue(CellKind.EMPTY)


def number_cell(value: Union[int, float]) -> CellValue:
    return CellValue(CellKind.NUMBER, value)


def text_cell(value: str) -> CellValue:
    return CellValue(CellKind.TEXT, value)


def parse_number(text: str) -> Optional[Union[int, float]]:
    """
    Parse a trimmed string as a decimal number, or return None
    """
    if not NUMBER_PATTERN.match(text):
        return None

    number = float(text)
    # Literals such as "1e999" or a few hundred digits overflow to infinity
    if not math.isfinite(number):
        return None

    if INTEGER_PATTERN.match(text) and abs(number) <= MAX_EXACT_INTEGER:
        return int(number)
    return number


def parse_cell(raw: Any) -> CellValue:
    """
    Turn a raw cell from a decoded file or JSON payload into a tagged value
    """
    if raw is None:
        return EMPTY_CELL

    if isinstance(raw, CellValue):
        return raw

    if isinstance(raw, bool):
        return text_cell("true" if raw else "false")

    if isinstance(raw, int):
        if abs(raw) <= MAX_EXACT_INTEGER:
            return number_cell(raw)
        try:
            return number_cell(float(raw))
        except OverflowError:
            return text_cell(str(raw))

    if isinstance(raw, float):
        if not math.isfinite(raw):
            return text_cell(str(raw))
        return number_cell(raw)

    text = str(raw).strip()
    if not text:
        return EMPTY_CELL

    number = parse_number(text)
    if number is not None:
        return number_cell(number)

    return text_cell(text)
