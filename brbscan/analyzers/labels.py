"""
Denomination Labels
===================

Output classes of the banknote model, in model order, with the spoken
label and the vibration pattern used for each bill.
"""

from enum import Enum
from typing import Optional, Tuple


class Denomination(Enum):
    """
    Banknote classes recognised by the model.

    Each member carries its model output index, the Arabic label that is
    shown and spoken, and a vibration pattern of alternating wait/vibrate
    durations in milliseconds (played once).
    """

    FIVE = (0, "five", "خمسة دنانير", (0, 200))
    TEN = (1, "ten", "عشرة دنانير", (0, 200, 300, 200))
    TWENTY = (2, "twenty", "عشرون دينار", (0, 600))
    FIFTY = (3, "fifty", "خمسون دينار", (0, 600, 400, 600))
    NONE = (4, "none", "لا شيء", None)

    def __init__(self, index: int, key: str, label: str,
                 vibration: Optional[Tuple[int, ...]]):
        self.index = index
        self.key = key
        self.label = label
        self.vibration = vibration

    @property
    def is_bill(self) -> bool:
        """True for every class except NONE."""
        return self is not Denomination.NONE

    @classmethod
    def from_index(cls, index: int) -> "Denomination":
        for member in cls:
            if member.index == index:
                return member
        raise ValueError(f"Unknown denomination index: {index}")

    @classmethod
    def from_key(cls, key: str) -> "Denomination":
        for member in cls:
            if member.key == key:
                return member
        raise ValueError(f"Unknown denomination key: {key!r}")


# Model output order
LABELS = tuple(sorted(Denomination, key=lambda d: d.index))
