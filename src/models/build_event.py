"""Structured build status parsed from a GoCD bot message."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, NonNegativeInt


class PassFail(str, Enum):
    passed = "passed"
    failed = "failed"


class BuildEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    monitor_name: str
    pipeline_stage: str
    build_counter: NonNegativeInt
    step_name: str
    stage_attempt: NonNegativeInt = 1
    pass_fail: PassFail

    @property
    def failed(self) -> bool:
        return self.pass_fail is PassFail.failed
