class MachineError(Exception):
    """Base of every failure raised while a logic machine executes.

    `address` is the instruction address that faulted, or None when the
    failure happened outside `run()` (e.g. while the host pushed operands).
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.address = None


class StackOverflow(MachineError):
    pass


class StackUnderflow(MachineError):
    pass


class InvalidConstantIndex(MachineError):
    pass


class TypeMismatch(MachineError):
    pass
