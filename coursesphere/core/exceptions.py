"""Error taxonomy for client-side CourseSphere operations.

Validation and permission failures are raised before any network call.
Permission checks are advisory: the backend does not enforce ownership, so
``PermissionDenied`` guards the user experience, not the data.
"""

from __future__ import annotations

from typing import Optional


class CourseSphereError(Exception):
    """Base exception for all CourseSphere errors."""

    pass


class ValidationError(CourseSphereError):
    """Raised when form input fails client-side validation."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class PermissionDenied(CourseSphereError):
    """Raised when the current user's role does not allow an action."""

    def __init__(self, action: str, user_id: Optional[str] = None, resource_id: Optional[str] = None):
        self.action = action
        self.user_id = user_id
        self.resource_id = resource_id
        super().__init__(f"user {user_id!r} is not allowed to {action} ({resource_id})")


class NotAuthenticated(CourseSphereError):
    """Raised when an operation needs a logged-in user and there is none."""

    def __init__(self, message: str = "no user is logged in"):
        super().__init__(message)


class ResourceError(CourseSphereError):
    """Raised on a non-success response or a transport failure."""

    def __init__(
        self,
        method: str,
        path: str,
        status_code: Optional[int] = None,
        detail: str = "",
    ):
        self.method = method
        self.path = path
        self.status_code = status_code
        self.detail = detail
        status_text = f" ({status_code})" if status_code is not None else ""
        super().__init__(f"{method} {path} failed{status_text}: {detail}".rstrip(": "))


class ConflictError(ResourceError):
    """Raised when a conditional update was rejected because the record changed."""

    pass


class ViewClosed(CourseSphereError):
    """Raised when a result arrives for a view that has already been torn down."""

    pass
