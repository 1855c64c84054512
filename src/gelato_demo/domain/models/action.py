from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.gelato_demo.domain.models.operation import DataFlow, Operation
from src.gelato_demo.domain.models.types import HASH_ZERO, Address, HexData


class Action(BaseModel):
    model_config = ConfigDict(frozen=True)

    addr: Address = Field(description="Contract holding the action logic.")
    data: HexData = Field(default=HASH_ZERO, description="Encoded call data.")
    operation: Operation = Field(
        default=Operation.CALL, description="Call or delegatecall from the user proxy."
    )
    data_flow: DataFlow = Field(
        default=DataFlow.NONE, description="Data hand-off to neighbouring actions."
    )
    value: int = Field(default=0, ge=0, description="Native value sent with the action.")
    terms_ok_check: bool = Field(
        default=False, description="Whether termsOk must pass before execution."
    )

    @model_validator(mode="after")
    def _delegatecall_has_no_value(self) -> Action:
        if self.operation is Operation.DELEGATECALL and self.value:
            raise ValueError("delegatecall actions cannot carry value")
        return self


def validate_action_chain(actions: Sequence[Action]) -> None:
    """Reject consumers that are not directly preceded by a producer."""
    for index, action in enumerate(actions):
        if not action.data_flow.consumes:
            continue
        if index == 0 or not actions[index - 1].data_flow.produces:
            raise ValueError(
                f"action {index} ({action.addr}) expects data in but the previous "
                "action does not pass data out"
            )
