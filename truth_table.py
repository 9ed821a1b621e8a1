from __future__ import annotations

import logging
import sys

from isa import Opcode
from values import OFF, ON, Bit
from workbench import Workbench


def truth_table(opcode: Opcode) -> list[tuple]:
    bench = Workbench()
    left = bench.add_pin()
    right = bench.add_pin()
    gate = bench.add_gate(opcode, (left, right))
    output = bench.gates[gate].output
    rows = []
    for a in (OFF, ON):
        for b in (OFF, ON):
            bench.set_pin(left, a)
            bench.set_pin(right, b)
            bench.update()
            rows.append((a, b, bench.pin_value(output)))
    return rows


def signal(value) -> str:
    if value is None:
        return "undefined"
    if isinstance(value, Bit):
        return repr(value.state)
    return repr(value)


def format_row(row: tuple) -> str:
    a, b, out = row
    return "{} {} -> {}".format(signal(a), signal(b), signal(out))


def main(opcode_name: str):
    opcode = Opcode(opcode_name)
    assert opcode.is_binary(), "Not a gate opcode: {}".format(opcode_name)
    for row in truth_table(opcode):
        print(format_row(row))


if __name__ == "__main__":
    logging.getLogger().setLevel(logging.DEBUG)
    assert len(sys.argv) == 2, "Wrong arguments: truth_table.py <and|or|nand>"
    _, opcode_arg = sys.argv
    main(opcode_arg)
