from pydantic import BaseModel, ConfigDict, Field, field_validator

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class SupervisorSettings(BaseModel):
    """Pydantic configuration for supervision cadence and logging"""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        extra='forbid'
    )

    retry_interval: float = Field(default=2.0, gt=0, le=300.0, description="Delay between supervision iterations in seconds")
    refresh_interval: float = Field(default=5.0, gt=0, le=300.0, description="Delay between status table redraws in seconds")

    log_level: str = Field(default="WARNING", description="Logging level")
    json_logs: bool = Field(default=False, description="Emit JSON formatted logs")
    log_file: str | None = Field(default=None, description="Optional file to write logs to")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the logging level name"""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Log level must be one of {', '.join(LOG_LEVELS)}")
        return level
