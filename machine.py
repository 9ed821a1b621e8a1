from __future__ import annotations

import logging
import sys
from dataclasses import dataclass

from errors import MachineError, StackOverflow, StackUnderflow, TypeMismatch
from isa import Opcode
from program import Program
from values import OFF, ON, VOID, Bit, Value, bit

STACK_CAPACITY = 255


class OperandStack:
    """Fixed-capacity, bounds-checked value stack.

    Slots are preallocated; `top` is the count of live values, so clearing is
    O(1) and leaves stale slots behind.
    """

    def __init__(self, capacity: int = STACK_CAPACITY):
        assert capacity > 0, "Stack capacity must be positive: {}".format(capacity)
        self._capacity = capacity
        self._slots = [VOID] * capacity
        self._top = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def top(self) -> int:
        return self._top

    def clear(self):
        self._top = 0

    def push(self, value: Value):
        if self._top == self._capacity:
            raise StackOverflow("stack overflow: capacity {}".format(self._capacity))
        self._slots[self._top] = value
        self._top += 1

    def pop(self) -> Value:
        if self._top == 0:
            raise StackUnderflow("stack underflow")
        self._top -= 1
        return self._slots[self._top]

    def peek(self) -> Value | None:
        if self._top == 0:
            return None
        return self._slots[self._top - 1]

    def peek_many(self, count: int) -> list[Value]:
        if self._top < count:
            raise StackUnderflow("stack underflow")
        return self._slots[self._top - count : self._top]

    def values(self) -> list[Value]:
        return self._slots[: self._top]

    def __len__(self):
        return self._top

    def __repr__(self):
        return "[{}]".format(", ".join(repr(value) for value in self.values()))


class LogicMachine:
    def __init__(self, program: Program, stack_capacity: int = STACK_CAPACITY):
        self.program = program
        self._stack = OperandStack(stack_capacity)
        self._instruction_pointer = 0

    @property
    def instruction_pointer(self) -> int:
        return self._instruction_pointer

    @property
    def stack(self) -> OperandStack:
        return self._stack

    def reset(self):
        self._instruction_pointer = 0

    def clear_stack(self):
        self._stack.clear()

    def push(self, value: Value):
        self._stack.push(value)

    def pop(self) -> Value:
        return self._stack.pop()

    def result(self) -> Value | None:
        return self._stack.peek()

    def run(self) -> Value | None:
        self.program.seal()
        logging.debug("%s", repr(self))
        while self._instruction_pointer < len(self.program):
            address = self._instruction_pointer
            instr = self._fetch()
            try:
                self._execute(instr)
            except MachineError as error:
                error.address = address
                raise
            logging.debug("%s", repr(self))
        return self.result()

    def _fetch(self) -> dict:
        self._instruction_pointer += 1
        return self.program[self._instruction_pointer - 1]

    def _execute(self, instr: dict):
        opcode = instr["opcode"]
        match opcode:
            case Opcode.PUSH:
                self._stack.push(VOID)
            case Opcode.POP:
                self._stack.pop()
            case Opcode.CONST:
                value = self.program.constant(instr["address"])
                self._stack.push(value)
            case Opcode.AND | Opcode.OR | Opcode.NAND:
                left, right = self._stack.peek_many(2)
                value = self._binary(opcode, left, right)
                self._stack.pop()
                self._stack.pop()
                self._stack.push(value)
            case _:
                assert False, "Unknown opcode {}".format(opcode)

    @staticmethod
    def _binary(opcode: Opcode, left: Value, right: Value) -> Bit:
        if not isinstance(left, Bit) or not isinstance(right, Bit):
            raise TypeMismatch("{} expects two bits, got {!r} and {!r}".format(opcode.value, left, right))
        match opcode:
            case Opcode.AND:
                return bit(left.is_on() and right.is_on())
            case Opcode.OR:
                return bit(left.is_on() or right.is_on())
            case Opcode.NAND:
                return bit(not (left.is_on() and right.is_on()))
        assert False, "Not a binary opcode {}".format(opcode)

    def __repr__(self):
        return "IP: {:3} STACK: {}".format(self._instruction_pointer, self._stack)


@dataclass(frozen=True)
class Outcome:
    """Result of one evaluation cycle: a value (possibly None) or an error."""

    value: Value | None = None
    error: MachineError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def evaluate(machine: LogicMachine, operands: list[Value]) -> Outcome:
    """
    One evaluation cycle: clear the stack, push the operands in order, reset
    the instruction pointer and run to completion.
    """
    try:
        machine.clear_stack()
        for operand in operands:
            machine.push(operand)
        machine.reset()
        value = machine.run()
    except MachineError as error:
        logging.warning("%s: %s", type(error).__name__, error)
        return Outcome(error=error)
    logging.info("result: %s", value)
    return Outcome(value=value)


def simulation(program: Program, operands: list[Value], stack_capacity: int = STACK_CAPACITY) -> Outcome:
    return evaluate(LogicMachine(program, stack_capacity), operands)


OPERANDS = {"0": OFF, "1": ON, "-": VOID}


def main(opcode_name: str, left: str, right: str):
    opcode = Opcode(opcode_name)
    assert opcode.is_binary(), "Not a gate opcode: {}".format(opcode_name)
    assert {left, right} <= OPERANDS.keys(), "Operands must be 0, 1 or -: {} {}".format(left, right)
    program = Program()
    program.append({"opcode": opcode})
    outcome = simulation(program, [OPERANDS[left], OPERANDS[right]])
    print(program)
    print("result: {}".format(outcome.value if outcome.ok else "undefined"))


if __name__ == "__main__":
    logging.getLogger().setLevel(logging.DEBUG)
    assert len(sys.argv) == 4, "Wrong arguments: machine.py <and|or|nand> <0|1|-> <0|1|->"
    _, opcode_arg, left_arg, right_arg = sys.argv
    main(opcode_arg, left_arg, right_arg)
