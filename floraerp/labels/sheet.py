from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

logger = logging.getLogger(__name__)

SLOT_COUNT = 24
COLUMNS = 3


@dataclass(frozen=True)
class ResolvedItem:
    id: str
    name: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "name": self.name}


@dataclass
class LabelSheet:
    """One physical label sheet: 24 slots, each empty (None) or holding an item."""

    slots: list[Optional[ResolvedItem]]
    start_position: int
    dropped_overflow: int = 0
    dropped_unresolved: tuple[str, ...] = field(default_factory=tuple)

    @property
    def placed(self) -> int:
        return sum(1 for slot in self.slots if slot is not None)

    @property
    def is_empty(self) -> bool:
        return self.placed == 0

    def rows(self, columns: int = COLUMNS) -> list[list[Optional[ResolvedItem]]]:
        return [self.slots[i:i + columns] for i in range(0, len(self.slots), columns)]

    def to_dict(self) -> dict[str, object]:
        return {
            "start": self.start_position,
            "slots": [slot.to_dict() if slot else None for slot in self.slots],
            "placed": self.placed,
            "dropped_overflow": self.dropped_overflow,
            "dropped_unresolved": list(self.dropped_unresolved),
        }


def clamp_start(start_position: int) -> int:
    # Below 1 is pulled up to the first slot; above SLOT_COUNT is kept and places nothing.
    return max(1, start_position)


def assign_slots(labels: Sequence[ResolvedItem], start_position: int,
                 unresolved: Iterable[str] = ()) -> LabelSheet:
    start = clamp_start(start_position)
    slots: list[Optional[ResolvedItem]] = [None] * SLOT_COUNT

    cursor = start - 1
    overflow = 0
    for item in labels:
        if cursor < SLOT_COUNT:
            slots[cursor] = item
            cursor += 1
        else:
            overflow += 1

    sheet = LabelSheet(
        slots=slots,
        start_position=start,
        dropped_overflow=overflow,
        dropped_unresolved=tuple(unresolved),
    )
    logger.info(
        "Label sheet start=%s placed=%s overflow=%s unresolved=%s",
        start, sheet.placed, overflow, len(sheet.dropped_unresolved),
    )
    return sheet
