"""Base exception class for application errors.

Core exception logic with auto-generation of error codes and messages.
"""

import re
from typing import Any, ClassVar

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def code_from_class_name(name: str) -> str:
    """Turn an exception class name into an UPPER_SNAKE code.

    ``NotFoundError`` -> ``NOT_FOUND``, ``OrderLockedException`` -> ``ORDER_LOCKED``.
    """
    for suffix in ("Exception", "Error"):
        if name.endswith(suffix) and name != suffix:
            name = name[: -len(suffix)]
            break
    return _CAMEL_BOUNDARY.sub("_", name).upper()


class AppError(Exception):
    """Base class for all application errors.

    Features:
    - Auto-generates code from class name (e.g., NotFoundError -> NOT_FOUND)
    - Auto-generates default_message from docstring
    - Carries structured details that are added to the error response
    """

    status_code: ClassVar[int] = 500
    code: ClassVar[str] = "INTERNAL_ERROR"
    default_message: ClassVar[str] = "Internal server error"

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.explicit_message = message or None
        self.message = message or self.default_message
        self.details: dict[str, Any] = dict(details) if details else {}
        super().__init__(self.message)

    def __init_subclass__(cls, **kwargs: Any) -> None:
        """Auto-generate code and default_message for subclasses."""
        super().__init_subclass__(**kwargs)

        if "code" not in cls.__dict__:
            cls.code = code_from_class_name(cls.__name__)

        if "default_message" not in cls.__dict__ and cls.__doc__:
            cls.default_message = cls.__doc__.strip().split("\n")[0]

    def response_properties(self) -> dict[str, Any]:
        """Extra properties to add to the JSON error body."""
        return dict(self.details)
