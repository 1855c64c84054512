from pydantic import BaseModel, ConfigDict, Field

from src.gelato_demo.domain.models.provider import GelatoProvider
from src.gelato_demo.domain.models.task import Task


class TaskCycle(BaseModel):
    model_config = ConfigDict(frozen=True)

    provider: GelatoProvider
    tasks: list[Task] = Field(min_length=1, description="Task variants in the cycle.")
    expiry_date: int = Field(
        default=0, ge=0, description="Unix timestamp after which the cycle expires, 0 for never."
    )
    cycles: int = Field(ge=1, description="Total number of executions.")

    @property
    def expires(self) -> bool:
        return self.expiry_date != 0
