from __future__ import annotations

import re
from dataclasses import dataclass

_LABEL_RE = re.compile(r"^\s*([A-Za-z]+)([1-9][0-9]*)\s*$")


def column_label(col: int) -> str:
    """Spreadsheet column name for a 0-indexed column (0 -> A, 26 -> AA)."""
    if col < 0:
        raise ValueError(f"Column index must be >= 0, got {col}")
    label = ""
    while col >= 0:
        label = chr(ord("A") + col % 26) + label
        col = col // 26 - 1
    return label


def column_index(label: str) -> int:
    """Inverse of column_label."""
    if not label or not label.isalpha():
        raise ValueError(f"Invalid column label: {label!r}")
    col = 0
    for ch in label.upper():
        col = col * 26 + (ord(ch) - ord("A") + 1)
    return col - 1


@dataclass(frozen=True)
class CellRef:
    row: int
    col: int

    @property
    def label(self) -> str:
        return f"{column_label(self.col)}{self.row + 1}"

    @classmethod
    def parse(cls, label: str) -> "CellRef":
        m = _LABEL_RE.match(label)
        if not m:
            raise ValueError(f"Invalid cell reference: {label!r}")
        return cls(row=int(m.group(2)) - 1, col=column_index(m.group(1)))
