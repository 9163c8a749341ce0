"""Connection request and registry entry models.

A client describes its target database either with a full connection string
or with discrete fields. Both are normalized into the ``ConnectionParams``
tagged union before they reach the pool adapter.
"""

import logging
import re
from datetime import UTC, datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from pg_browser.models.errors import ValidationError

logger = logging.getLogger(__name__)

_DSN_PASSWORD_RE = re.compile(r"(?P<prefix>://[^:/@]+:)[^@]*(?P<suffix>@)")


class ConnectionRequest(BaseModel):
    """Wire body of a connect call.

    Either ``connectionString`` or the discrete fields are expected. Nothing
    enforces that only one of them is present.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    host: str | None = None
    port: int | None = Field(default=None, ge=1, le=65535)
    database: str | None = None
    user: str | None = None
    password: SecretStr | None = None
    connection_string: SecretStr | None = Field(default=None, alias="connectionString")

    @field_validator("port", mode="before")
    @classmethod
    def blank_port_to_none(cls, v: Any) -> Any:
        """Treat a blank port as absent so the default port applies."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def has_fields(self) -> bool:
        """Check whether any discrete connection field was supplied."""
        return any(
            value is not None
            for value in (self.host, self.port, self.database, self.user, self.password)
        )


class ConnectionStringParams(BaseModel):
    """Connection described by a libpq-style URL."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["connection_string"] = "connection_string"
    connection_string: SecretStr

    @property
    def safe_dsn(self) -> str:
        """Connection string with the password masked, for logging."""
        return _DSN_PASSWORD_RE.sub(
            r"\g<prefix>***\g<suffix>", self.connection_string.get_secret_value()
        )


class ConnectionFieldsParams(BaseModel):
    """Connection described by discrete host/port/database/user/password fields."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["fields"] = "fields"
    host: str | None = None
    port: int = Field(default=5432, ge=1, le=65535)
    database: str | None = None
    user: str | None = None
    password: SecretStr | None = None

    @property
    def safe_dsn(self) -> str:
        """Build DSN with masked password for logging."""
        user = self.user or ""
        host = self.host or ""
        return f"postgresql://{user}:***@{host}:{self.port}/{self.database or ''}"


ConnectionParams = Annotated[
    ConnectionStringParams | ConnectionFieldsParams, Field(discriminator="kind")
]


def parse_connection_request(
    request: ConnectionRequest, default_port: int = 5432
) -> ConnectionStringParams | ConnectionFieldsParams:
    """Normalize a connect body into one variant of ``ConnectionParams``.

    A non-empty connection string always wins; discrete fields sent alongside
    it are ignored.

    Args:
        request: Parsed request body.
        default_port: Port used when the fields variant omits one.

    Returns:
        The connection-string or the fields variant.

    Raises:
        ValidationError: If neither a connection string nor a host or
            database was supplied.
    """
    if request.connection_string and request.connection_string.get_secret_value():
        if request.has_fields():
            logger.warning(
                "Connection string supplied together with discrete fields; fields ignored"
            )
        return ConnectionStringParams(connection_string=request.connection_string)

    if not request.host and not request.database:
        raise ValidationError(
            "Either connectionString or host/database fields must be provided",
            details={"fields": ["connectionString", "host", "database"]},
        )

    return ConnectionFieldsParams(
        host=request.host,
        port=request.port or default_port,
        database=request.database,
        user=request.user,
        password=request.password,
    )


class ConnectionEntry(BaseModel):
    """A live registry entry: the pool and the parameters it was built from."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    connection_id: str
    pool: Any = Field(..., description="asyncpg pool owned by this entry")
    config: ConnectionParams
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
