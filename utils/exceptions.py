from rest_framework import status


class APIError(Exception):
    """Operational error raised from a view; rendered as the error envelope."""

    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
