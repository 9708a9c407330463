"""Principal and access rule models."""

import re
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from starlette.requests import Request


class Principal(BaseModel):
    """Authenticated caller as reported by the authentication layer."""

    model_config = ConfigDict(frozen=True)

    name: str
    roles: frozenset[str] = Field(default_factory=frozenset)

    def has_any_role(self, roles: tuple[str, ...] | frozenset[str]) -> bool:
        return not roles or bool(self.roles.intersection(roles))


PrincipalResolver = Callable[[Request], Principal | None]


class AccessRule(BaseModel):
    """Route-level authorization rule.

    ``pattern`` is a path glob: ``*`` matches one path segment and ``**``
    any number of segments. An empty ``roles`` only requires authentication.
    """

    model_config = ConfigDict(frozen=True)

    pattern: str
    roles: tuple[str, ...] = ()
    permit_all: bool = False

    _regex: re.Pattern[str] = PrivateAttr()

    def model_post_init(self, __context: Any) -> None:
        parts = re.split(r"(\*\*|\*)", self.pattern)
        self._regex = re.compile(
            "".join(
                ".*" if part == "**" else "[^/]*" if part == "*" else re.escape(part)
                for part in parts
            )
        )

    def matches(self, path: str) -> bool:
        return self._regex.fullmatch(path) is not None
