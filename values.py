from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class BitValue(int, Enum):
    OFF = 0
    ON = 1

    def is_on(self) -> bool:
        return self is BitValue.ON

    def is_off(self) -> bool:
        return self is BitValue.OFF

    def __repr__(self):
        return self.name.capitalize()


@dataclass(frozen=True)
class Void:
    """Absence of a meaningful value; what `push` produces."""

    def __repr__(self):
        return "Void"


@dataclass(frozen=True)
class Bit:
    """Two-state logic signal."""

    state: BitValue

    def is_on(self) -> bool:
        return self.state.is_on()

    def is_off(self) -> bool:
        return self.state.is_off()

    def __repr__(self):
        return "Bit({!r})".format(self.state)


Value = Union[Void, Bit]

VOID = Void()
ON = Bit(BitValue.ON)
OFF = Bit(BitValue.OFF)


def bit(flag: bool) -> Bit:
    return ON if flag else OFF
