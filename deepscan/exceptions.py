from typing import ClassVar


class ServiceError(Exception):
    """Base for errors that surface to API clients as a JSON envelope."""

    status_code: ClassVar[int] = 500
    title: ClassVar[str] = "Internal server error"
