from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

PackageManagerName = Literal["dnf", "yum", "zypper", "apt"]


class SudoersSettings(BaseModel):
    """Where and for whom the agent's sudoers drop-in is written."""

    model_config = ConfigDict(extra="forbid")

    account: str = Field(default="landesk", pattern=r"^[a-z_][a-z0-9_.-]*$")
    path: str = Field(default="/etc/sudoers.d/10_landesk", pattern=r"^/")
    mode: int = Field(default=0o440, ge=0, le=0o7777)
    owner: str = "root"
    group: str = "root"

    @field_validator("mode", mode="before")
    @classmethod
    def _octal_string(cls, value: Any) -> Any:
        # "0440" / "0o440" are read as octal; YAML's own 0440 already arrives as an int.
        if isinstance(value, str):
            try:
                return int(value, 8)
            except ValueError:
                raise ValueError(f"mode {value!r} is not an octal number") from None
        return value


class Settings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # Whole-run budget; resources not reached in time are reported as aborted.
    timeout_seconds: Optional[float] = Field(default=None, gt=0)
    command_timeout_seconds: float = Field(default=900.0, gt=0)
    package_manager: Optional[PackageManagerName] = None  # overrides the per-family default
    sudoers: SudoersSettings = Field(default_factory=SudoersSettings)
    report_path: Optional[str] = None
