"""Run-time configuration for the test engine."""

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator


class EngineConfig(BaseModel):
    """Options shared read-only by every test in a run."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(..., description="Base URL prepended to every test path")
    client_id: str | None = None
    auth_token: SecretStr | None = None
    timeout: int = Field(
        default=30, ge=0, description="Per-call HTTP timeout in seconds (0 disables)"
    )
    debug: bool = False

    @field_validator("host")
    @classmethod
    def _host_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("host must not be empty")
        return value.strip()
