from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from coursesphere.modules._ids import coerce_id


class User(BaseModel):
    """A user record from the ``/users`` collection."""

    id: str
    name: str
    email: str
    password: Optional[str] = None

    model_config = ConfigDict(extra="allow")

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value: Any) -> Any:
        return coerce_id(value)

    def public(self) -> "User":
        """Copy without the password, suitable for persisting in a session."""
        return self.model_copy(update={"password": None})


class Session(BaseModel):
    """The authenticated identity: an opaque token plus the user it belongs to."""

    token: str
    user: User
