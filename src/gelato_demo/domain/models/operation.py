from enum import IntEnum


class Operation(IntEnum):
    """How the user proxy invokes an action."""

    CALL = 0
    DELEGATECALL = 1


class DataFlow(IntEnum):
    """Direction in which an action hands data to its neighbours."""

    NONE = 0
    IN = 1
    OUT = 2
    IN_AND_OUT = 3

    @property
    def consumes(self) -> bool:
        return self in (DataFlow.IN, DataFlow.IN_AND_OUT)

    @property
    def produces(self) -> bool:
        return self in (DataFlow.OUT, DataFlow.IN_AND_OUT)
