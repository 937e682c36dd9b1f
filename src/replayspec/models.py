"""Configuration and summary models for replayspec."""

from pydantic import BaseModel, ConfigDict, Field

from replayspec.exceptions.core import ErrorLevel


class RunnerConfig(BaseModel):
    """Settings for a `Runner`.

    Params:
        error_level: Detail level used by `Runner.report()`.
        capture_locations: Record the user source line of each failure. Turning
            this off skips the stack inspection done for every failure.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    error_level: ErrorLevel = ErrorLevel.USER
    capture_locations: bool = True


class ReportSummary(BaseModel):
    """Aggregate counts over a canonical result tree."""

    model_config = ConfigDict(frozen=True)

    total_specs: int = Field(ge=0)
    total_failures: int = Field(ge=0)

    @property
    def is_passing(self) -> bool:
        return self.total_failures == 0

    def __str__(self) -> str:
        return f"{self.total_specs} specs, {self.total_failures} failures"
