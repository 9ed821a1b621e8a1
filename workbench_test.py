import contextlib
import io
import itertools
import logging
import unittest

import pytest

from isa import Opcode
from truth_table import format_row, main, truth_table
from values import OFF, ON, VOID, bit
from workbench import PinKind, Workbench, gate_program


def half_adder(bench: Workbench, a: int, b: int) -> tuple[int, int]:
    """XOR out of four NAND gates, carry from an AND gate."""
    n1 = bench.gates[bench.add_gate(Opcode.NAND, (a, b))].output
    n2 = bench.gates[bench.add_gate(Opcode.NAND, (a, n1))].output
    n3 = bench.gates[bench.add_gate(Opcode.NAND, (b, n1))].output
    total = bench.gates[bench.add_gate(Opcode.NAND, (n2, n3))].output
    carry = bench.gates[bench.add_gate(Opcode.AND, (a, b))].output
    return total, carry


class TestWorkbench(unittest.TestCase):
    def test_gate_program(self):
        program = gate_program(Opcode.NAND)
        self.assertEqual(program.instructions, [{"opcode": Opcode.NAND}])
        with pytest.raises(AssertionError):
            gate_program(Opcode.PUSH)

    def test_add_gate_creates_output_pin(self):
        bench = Workbench()
        a = bench.add_pin(value=ON)
        b = bench.add_pin(value=ON)
        gate = bench.add_gate(Opcode.AND, (a, b))
        output = bench.gates[gate].output
        self.assertEqual(output, 2)
        self.assertEqual(bench.pins[output].kind, PinKind.OUT)
        self.assertEqual(bench.pin_value(output), VOID)

    def test_unknown_pin(self):
        bench = Workbench()
        a = bench.add_pin()
        with pytest.raises(AssertionError):
            bench.add_gate(Opcode.OR, (a, 7))
        with pytest.raises(AssertionError):
            bench.set_pin(3, ON)

    def test_single_gate(self):
        bench = Workbench()
        a = bench.add_pin(value=ON)
        b = bench.add_pin(value=OFF)
        output = bench.gates[bench.add_gate(Opcode.OR, (a, b))].output
        self.assertEqual(bench.update(), 0)
        self.assertEqual(bench.pin_value(output), ON)
        machine = bench.gates[0].machine
        self.assertEqual(machine.instruction_pointer, 0)
        self.assertEqual(machine.stack.top, 0)

    def test_half_adder(self):
        for x, y in itertools.product((False, True), repeat=2):
            bench = Workbench()
            a = bench.add_pin(value=bit(x))
            b = bench.add_pin(value=bit(y))
            total, carry = half_adder(bench, a, b)
            self.assertEqual(bench.update(), 0)
            self.assertEqual(bench.pin_value(total), bit(x != y))
            self.assertEqual(bench.pin_value(carry), bit(x and y))

    def test_inputs_follow_pin_changes(self):
        bench = Workbench()
        a = bench.add_pin(value=ON)
        b = bench.add_pin(value=ON)
        output = bench.gates[bench.add_gate(Opcode.NAND, (a, b))].output
        bench.update()
        self.assertEqual(bench.pin_value(output), OFF)
        bench.set_pin(b, OFF)
        bench.update()
        self.assertEqual(bench.pin_value(output), ON)

    def test_void_input_is_undefined(self):
        bench = Workbench()
        a = bench.add_pin()
        b = bench.add_pin(value=ON)
        output = bench.gates[bench.add_gate(Opcode.AND, (a, b))].output
        self.assertEqual(bench.update(), 1)
        self.assertIsNone(bench.pin_value(output))

    def test_undefined_propagates(self):
        bench = Workbench()
        a = bench.add_pin()
        b = bench.add_pin(value=ON)
        mid = bench.gates[bench.add_gate(Opcode.AND, (a, b))].output
        out = bench.gates[bench.add_gate(Opcode.OR, (mid, b))].output
        self.assertEqual(bench.update(), 2)
        self.assertIsNone(bench.pin_value(out))
        bench.set_pin(a, OFF)
        self.assertEqual(bench.update(), 0)
        self.assertEqual(bench.pin_value(out), ON)

    def test_out_of_order_gates_settle_next_frame(self):
        bench = Workbench()
        a = bench.add_pin(value=ON)
        b = bench.add_pin(value=OFF)
        c = bench.add_pin(value=ON)
        mid = bench.add_pin(PinKind.OUT)
        late = bench.gates[bench.add_gate(Opcode.AND, (mid, c))].output
        bench.add_gate(Opcode.OR, (a, b), output=mid)
        self.assertEqual(bench.update(), 1)
        self.assertIsNone(bench.pin_value(late))
        self.assertEqual(bench.update(), 0)
        self.assertEqual(bench.pin_value(late), ON)

    def test_failure_is_logged(self):
        bench = Workbench()
        a = bench.add_pin()
        bench.add_gate(Opcode.NAND, (a, a))
        with self.assertLogs(level=logging.WARNING) as logs:
            bench.update()
        self.assertEqual(
            logs.output,
            [
                "WARNING:root:TypeMismatch: nand expects two bits, got Void and Void",
                "WARNING:root:gate NAND(0, 0 -> 1) undefined",
            ],
        )


class TestTruthTable(unittest.TestCase):
    def test_and(self):
        rows = [format_row(row) for row in truth_table(Opcode.AND)]
        self.assertEqual(rows, ["Off Off -> Off", "Off On -> Off", "On Off -> Off", "On On -> On"])

    def test_or(self):
        outputs = [out for _, _, out in truth_table(Opcode.OR)]
        self.assertEqual(outputs, [OFF, ON, ON, ON])

    def test_nand(self):
        outputs = [out for _, _, out in truth_table(Opcode.NAND)]
        self.assertEqual(outputs, [ON, ON, ON, OFF])

    def test_undefined_row(self):
        self.assertEqual(format_row((ON, VOID, None)), "On Void -> undefined")

    def test_main_prints_rows(self):
        with contextlib.redirect_stdout(io.StringIO()) as stdout:
            main("or")
        self.assertEqual(stdout.getvalue(), "Off Off -> Off\nOff On -> On\nOn Off -> On\nOn On -> On\n")

    def test_main_rejects_non_gate(self):
        with pytest.raises(AssertionError):
            main("const")
