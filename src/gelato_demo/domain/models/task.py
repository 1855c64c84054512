from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.gelato_demo.domain.models.action import Action, validate_action_chain
from src.gelato_demo.domain.models.condition import Condition


class Task(BaseModel):
    model_config = ConfigDict(frozen=True)

    conditions: list[Condition] = Field(
        default_factory=list, description="All conditions must hold before execution."
    )
    actions: list[Action] = Field(
        min_length=1, description="Executed in order, all-or-nothing."
    )
    self_provider_gas_limit: int = Field(
        default=0, ge=0, description="Gas limit override when the user self-provides."
    )
    self_provider_gas_price_ceil: int = Field(
        default=0, ge=0, description="Gas price ceiling when self-providing, 0 for none."
    )

    @model_validator(mode="after")
    def _check_chain(self) -> Task:
        validate_action_chain(self.actions)
        return self
