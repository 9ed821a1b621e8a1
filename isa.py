from __future__ import annotations

from enum import Enum


class Opcode(str, Enum):
    PUSH = "push"
    POP = "pop"
    CONST = "const"  # (address)
    AND = "and"  # (0: left, 1: right)
    OR = "or"  # (0: left, 1: right)
    NAND = "nand"  # (0: left, 1: right)

    def is_address(self):
        return self is Opcode.CONST

    def is_binary(self):
        return self in {Opcode.AND, Opcode.OR, Opcode.NAND}

    def __repr__(self):
        return self.name


def instruction(opcode: Opcode, address: int | None = None) -> dict:
    if opcode.is_address():
        valid = isinstance(address, int) and not isinstance(address, bool) and address >= 0
        assert valid, "Invalid constant address: {}".format(address)
        return {"opcode": opcode, "address": address}
    assert address is None, "Opcode {} takes no address".format(opcode.value)
    return {"opcode": opcode}


def format_instruction(instr: dict) -> str:
    if "address" in instr:
        return "{} {}".format(instr["opcode"].value, instr["address"])
    return instr["opcode"].value
