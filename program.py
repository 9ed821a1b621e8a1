from __future__ import annotations

from errors import InvalidConstantIndex
from isa import Opcode, format_instruction, instruction
from values import Value, Bit, Void


class ConstantPool:
    def __init__(self):
        self.values = []

    def put(self, value: Value) -> int:
        assert isinstance(value, (Bit, Void)), "Not a machine value: {!r}".format(value)
        address = len(self.values)
        self.values.append(value)
        return address

    def get(self, address: int) -> Value:
        if not 0 <= address < len(self.values):
            raise InvalidConstantIndex(
                "constant address {} out of range (pool size {})".format(address, len(self.values))
            )
        return self.values[address]

    def __len__(self):
        return len(self.values)


class Program:
    """
    Instruction sequence plus constant pool.

    Append-only while it is being built; the machine seals it on its first run
    and from then on it is read-only.
    """

    def __init__(self):
        self.instructions = []
        self.pool = ConstantPool()
        self._sealed = False

    @property
    def sealed(self) -> bool:
        return self._sealed

    def seal(self):
        self._sealed = True

    def append(self, instr: dict) -> int:
        assert not self._sealed, "Program is sealed"
        opcode = instr.get("opcode")
        assert isinstance(opcode, Opcode), "Unknown opcode: {!r}".format(opcode)
        checked = instruction(opcode, instr.get("address"))
        address = len(self.instructions)
        self.instructions.append(checked)
        return address

    def append_many(self, instructions: list[dict]) -> int:
        address = len(self.instructions)
        for instr in instructions:
            self.append(instr)
        return address

    def add_constant(self, value: Value) -> int:
        assert not self._sealed, "Program is sealed"
        return self.pool.put(value)

    def push_constant(self, value: Value) -> int:
        return self.append(instruction(Opcode.CONST, self.add_constant(value)))

    def constant(self, address: int) -> Value:
        return self.pool.get(address)

    def __len__(self):
        return len(self.instructions)

    def __getitem__(self, address: int) -> dict:
        return self.instructions[address]

    def __repr__(self):
        lines = ["{:3}: {}".format(i, format_instruction(instr)) for i, instr in enumerate(self.instructions)]
        lines += ["  #{}: {!r}".format(i, value) for i, value in enumerate(self.pool.values)]
        return "\n".join(lines)
