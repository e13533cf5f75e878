"""Return values of the account services."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class SessionResult:
    """Outcome of an action that may open a session (sign-up or login).

    On success `user` and `token` are set; on refusal only `error` is.
    """

    success: bool
    user: Optional[Any] = None
    token: Optional[str] = None
    error: Optional[str] = None
    message: Optional[str] = None


class RegisterResult(SessionResult):
    pass


class LoginResult(SessionResult):
    pass


@dataclass
class Result:
    """Outcome of a profile, password or seller-application action.

    `status_code` only matters on failure; 500 marks an unexpected error whose
    detail must not reach the client.
    """

    success: bool
    message: str
    data: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    status_code: int = 400

    @property
    def is_server_error(self) -> bool:
        return not self.success and self.status_code >= 500
