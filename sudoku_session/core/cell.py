"""Cell values: a placed digit, an empty cell or a set of pencil-mark notes."""

from __future__ import annotations
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Union

from .errors import InvariantViolation

DIGITS = range(1, 10)


@dataclass(frozen=True)
class Digit:
    """A placed digit (possibly wrong)."""
    value: int

    def __post_init__(self):
        if self.value not in DIGITS:
            raise InvariantViolation(f"Digit must be 1-9, got {self.value}")


@dataclass(frozen=True)
class Empty:
    """An empty cell."""


@dataclass(frozen=True)
class NoteSet:
    """Candidate digits recorded for a cell. May be empty."""
    digits: FrozenSet[int] = frozenset()

    def __post_init__(self):
        for d in self.digits:
            if d not in DIGITS:
                raise InvariantViolation(f"Note digit must be 1-9, got {d}")

    @classmethod
    def of(cls, digits: Iterable[int]) -> NoteSet:
        return cls(frozenset(digits))

    def toggle(self, digit: int) -> NoteSet:
        """Return a note-set with `digit` added, or removed if present."""
        return NoteSet(self.digits ^ {digit})

    def without(self, digit: int) -> NoteSet:
        return NoteSet(self.digits - {digit})

    def __contains__(self, digit: object) -> bool:
        return digit in self.digits

    def __len__(self) -> int:
        return len(self.digits)


EMPTY = Empty()

Cell = Union[Digit, Empty, NoteSet]

# Serialized form used by puzzle records: 0, a digit, or a list of notes.
RawCell = Union[int, List[int]]


def cell_from_raw(raw: RawCell) -> Cell:
    """Convert a serialized cell (0, 1-9 or a list of notes) to a cell value."""
    if isinstance(raw, (list, tuple, set, frozenset)):
        notes = [int(d) for d in raw]
        if any(d not in DIGITS for d in notes):
            raise ValueError(f"Notes must be digits 1-9, got {raw!r}")
        return NoteSet.of(notes)
    value = int(raw)
    if value == 0:
        return EMPTY
    if value not in DIGITS:
        raise ValueError(f"Cell value must be 0-9 or a list of notes, got {raw!r}")
    return Digit(value)


def cell_to_raw(cell: Cell) -> RawCell:
    """Convert a cell value back to its serialized form."""
    if isinstance(cell, Digit):
        return cell.value
    if isinstance(cell, NoteSet):
        return sorted(cell.digits)
    return 0
