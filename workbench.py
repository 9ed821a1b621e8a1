"""
Headless host for logic machines.

Pins and gates live in flat lists and refer to each other by index; a gate
never owns its pins. Composition happens here, outside the machine: one gate's
output pin index is another gate's input pin index.
"""

from __future__ import annotations

import logging
from enum import Enum

from isa import Opcode, instruction
from machine import STACK_CAPACITY, LogicMachine, evaluate
from program import Program
from values import VOID, Value


class PinKind(str, Enum):
    IN = "in"
    OUT = "out"

    def __repr__(self):
        return self.name


class Pin:
    def __init__(self, kind: PinKind, value: Value | None = VOID):
        self.kind = kind
        # None: undefined, the producing gate failed
        self.value = value

    def __repr__(self):
        return "Pin({!r}, {!r})".format(self.kind, self.value)


def gate_program(opcode: Opcode) -> Program:
    assert opcode.is_binary(), "Not a gate opcode: {}".format(opcode)
    program = Program()
    program.append(instruction(opcode))
    return program


class LogicGate:
    def __init__(self, opcode: Opcode, inputs: tuple[int, int], output: int, stack_capacity: int = STACK_CAPACITY):
        self.opcode = opcode
        self.inputs = inputs
        self.output = output
        self.machine = LogicMachine(gate_program(opcode), stack_capacity)

    def __repr__(self):
        return "{}({}, {} -> {})".format(self.opcode.name, self.inputs[0], self.inputs[1], self.output)


class Workbench:
    def __init__(self):
        self.pins = []
        self.gates = []

    def add_pin(self, kind: PinKind = PinKind.IN, value: Value | None = VOID) -> int:
        index = len(self.pins)
        self.pins.append(Pin(kind, value))
        return index

    def add_gate(self, opcode: Opcode, inputs: tuple[int, int], output: int | None = None) -> int:
        assert len(inputs) == 2, "A gate takes two input pins, got {}".format(len(inputs))
        for pin in inputs:
            self._check_pin(pin)
        if output is None:
            output = self.add_pin(PinKind.OUT)
        else:
            self._check_pin(output)
        index = len(self.gates)
        self.gates.append(LogicGate(opcode, (inputs[0], inputs[1]), output))
        return index

    def set_pin(self, index: int, value: Value | None):
        self._check_pin(index)
        self.pins[index].value = value

    def pin_value(self, index: int) -> Value | None:
        self._check_pin(index)
        return self.pins[index].value

    def update(self) -> int:
        """Evaluate every gate once, in insertion order. Returns the number of failed gates."""
        failed = 0
        for gate in self.gates:
            operands = [self._operand(pin) for pin in gate.inputs]
            outcome = evaluate(gate.machine, operands)
            if outcome.ok:
                self.pins[gate.output].value = outcome.value
            else:
                logging.warning("gate %s undefined", gate)
                self.pins[gate.output].value = None
                failed += 1
            gate.machine.reset()
            gate.machine.clear_stack()
        logging.info("frame: %d gates, %d failed", len(self.gates), failed)
        return failed

    def _operand(self, index: int) -> Value:
        value = self.pins[index].value
        return VOID if value is None else value

    def _check_pin(self, index: int):
        assert 0 <= index < len(self.pins), "Unknown pin: {}".format(index)
