"""
Configuration domain models.

Pydantic models for connection credentials and SQL Server targets
loaded from sql_targets.json.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator


class AuthType(Enum):
    """Authentication types for SQL Server connections."""

    WINDOWS = "windows"
    SQL = "sql"


class Credential(BaseModel):
    """
    Domain model for SQL login credentials.

    The password is held as a SecretStr so it never shows up in reprs or logs.
    """

    username: str = Field(..., description="SQL login name")
    password: SecretStr = Field(..., description="SQL login password")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Validate username is not empty."""
        if not v or not v.strip():
            raise ValueError("Username cannot be empty")
        return v.strip()

    def get_password(self) -> str:
        """Get the plain text password."""
        return self.password.get_secret_value()  # pylint: disable=no-member


class SqlTarget(BaseModel):
    """
    Domain model for a SQL Server target.

    Represents one instance entry from the targets file.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(..., description="Unique identifier/alias for this target")
    name: Optional[str] = Field(None, description="Human-readable display name")
    server: str = Field(..., description="SQL Server host name or IP")
    instance: Optional[str] = Field(None, description="Named instance (null for default)")
    port: Optional[int] = Field(None, description="TCP port, overrides the instance name")
    auth_type: AuthType = Field(AuthType.WINDOWS, description="Authentication method", alias="auth")
    username: Optional[str] = Field(None, description="SQL login (auth=sql)")
    password: Optional[SecretStr] = Field(None, description="SQL password (auth=sql)")
    credential_file: Optional[str] = Field(None, description="JSON file holding username/password")
    connect_timeout: int = Field(30, description="Seconds to wait for SQL connection")
    enabled: bool = Field(True, description="Whether this target is reported on")

    @field_validator("auth_type", mode="before")
    @classmethod
    def normalize_auth(cls, v):
        """Map legacy auth strings to enum."""
        if isinstance(v, str) and v.lower() in ("integrated", "windows"):
            return AuthType.WINDOWS
        if isinstance(v, str) and v.lower() == "sql":
            return AuthType.SQL
        return v

    @field_validator("server")
    @classmethod
    def validate_server(cls, v: str) -> str:
        """Validate server name format."""
        if not v or not v.strip():
            raise ValueError("Server name cannot be empty")
        return v.strip()

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: Optional[int]) -> Optional[int]:
        """Validate port number."""
        if v is not None and (v < 1 or v > 65535):
            raise ValueError("Port must be between 1 and 65535")
        return v

    @field_validator("connect_timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        if v < 1:
            raise ValueError("connect_timeout must be at least 1 second")
        return v

    @property
    def display_name(self) -> str:
        """Human-readable server name for reports."""
        if self.name:
            return self.name
        return self.server_instance

    @property
    def server_instance(self) -> str:
        """Server instance string for connection."""
        if self.port:
            return f"{self.server},{self.port}"
        elif self.instance:
            return f"{self.server}\\{self.instance}"
        return self.server

    def credential(self) -> Optional[Credential]:
        """SQL credential for this target, or None for Windows authentication."""
        if self.auth_type != AuthType.SQL:
            return None
        if not self.username or self.password is None:
            raise ValueError(
                f"Target '{self.id}' uses SQL authentication but has no username/password"
            )
        return Credential(username=self.username, password=self.password)
