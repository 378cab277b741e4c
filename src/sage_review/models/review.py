from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator


TITLE_MAX_LENGTH = 100


class Severity(str, Enum):
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


SEVERITY_ORDER = {
    Severity.LOW: 1,
    Severity.MEDIUM: 2,
    Severity.HIGH: 3,
    Severity.CRITICAL: 4,
}


class ReviewOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_tokens: int = Field(default=4000, gt=0)
    thinking_budget: int | None = Field(default=None, ge=0)
    guidelines: str = ""
    retries: int = Field(default=3, ge=0)


class ReviewRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    system_prompt: str
    user_prompt: str
    options: ReviewOptions = Field(default_factory=ReviewOptions)


class Usage(BaseModel):
    """Token counters normalized across vendors."""

    model_config = ConfigDict(extra="ignore")

    input_tokens: int = 0
    output_tokens: int = 0
    cache_creation_input_tokens: int | None = None
    cache_read_input_tokens: int | None = None
    total_tokens: int | None = None


class ReviewResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    usage: Usage
    model: str


class Finding(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    severity: Severity
    file: str = Field(min_length=1)
    line: int = Field(gt=0)
    title: str = Field(min_length=1)
    description: str = ""
    suggestion: str | None = None

    @field_validator("severity", mode="before")
    @classmethod
    def _upper_severity(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("title")
    @classmethod
    def _bound_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title must not be blank")
        return value[:TITLE_MAX_LENGTH]

    @field_validator("description", mode="before")
    @classmethod
    def _none_description(cls, value):
        return "" if value is None else value


class PricingEntry(BaseModel):
    """USD per one million tokens."""

    model_config = ConfigDict(frozen=True)

    input: float
    output: float
    cache_write: float | None = None
    cache_read: float | None = None


class SeverityCounts(BaseModel):
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0

    @property
    def total(self) -> int:
        return self.critical + self.high + self.medium + self.low


class ReviewOutcome(BaseModel):
    """Terminal record of one review run, success or failure."""

    completed: bool
    findings_count: int = 0
    counts: SeverityCounts = Field(default_factory=SeverityCounts)
    cost_estimate: float | None = None
    error: str | None = None
    skipped_reason: str | None = None
