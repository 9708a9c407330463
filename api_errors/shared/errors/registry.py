"""Registry of error mapping rules.

A rule binds an error category (an exception class, or its name) to status,
code and message overrides. The registry is built once at startup and only
read afterwards, so concurrent requests can share it without locking.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Literal

from api_errors.core.config import ErrorHandlingConfig
from api_errors.shared.logging import get_logger

logger = get_logger(__name__)

RuleAttribute = Literal["status", "code", "message"]


def qualified_name(cls: type) -> str:
    """``module.Qualname`` of a class."""
    return f"{cls.__module__}.{cls.__qualname__}"


@dataclass(frozen=True, slots=True)
class MappingRule:
    """Resolution overrides for one error category.

    ``category`` is either a class or a class name; names match the fully
    qualified name or the bare class name.
    """

    category: type[BaseException] | str
    status: int | None = None
    code: str | None = None
    message: str | None = None

    def __post_init__(self) -> None:
        if self.status is not None and not 100 <= self.status <= 599:
            raise ValueError(f"Invalid HTTP status {self.status} for {self.category_name}")
        if self.code is not None and not self.code:
            raise ValueError(f"Empty error code for {self.category_name}")

    @property
    def category_name(self) -> str:
        if isinstance(self.category, str):
            return self.category
        return qualified_name(self.category)

    def matches(self, cls: type) -> bool:
        """Check if the rule targets exactly this class (no subclass check)."""
        if isinstance(self.category, str):
            return self.category in (qualified_name(cls), cls.__name__)
        return self.category is cls


class RuleRegistry:
    """Immutable, priority-ordered collection of mapping rules.

    Lookup walks the error class MRO from the exact type towards ``object``.
    At each class the first registered rule that sets the requested attribute
    wins, so earlier registrations take priority at equal specificity.
    """

    __slots__ = ("_rules",)

    def __init__(self, rules: Iterable[MappingRule] = ()) -> None:
        self._rules: tuple[MappingRule, ...] = tuple(rules)

    def __iter__(self) -> Iterator[MappingRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def lookup(
        self, error: BaseException | type[BaseException], attribute: RuleAttribute
    ) -> str | int | None:
        """Find the value of ``attribute`` for the error's nearest category."""
        error_type = error if isinstance(error, type) else type(error)
        for cls in error_type.__mro__:
            value = self.value_at(cls, attribute)
            if value is not None:
                return value
        return None

    def value_at(self, cls: type, attribute: RuleAttribute) -> str | int | None:
        """Value of ``attribute`` from the first rule targeting exactly ``cls``."""
        for rule in self._rules:
            if rule.matches(cls):
                value = getattr(rule, attribute)
                if value is not None:
                    return value
        return None

    def knows(self, error: BaseException) -> bool:
        """Check if any rule targets the error's class or one of its bases."""
        return any(rule.matches(cls) for cls in type(error).__mro__ for rule in self._rules)

    def exception_classes(self) -> tuple[type[BaseException], ...]:
        """Classes referenced directly by rules (name-based rules excluded)."""
        seen: dict[type[BaseException], None] = {}
        for rule in self._rules:
            if isinstance(rule.category, type):
                seen.setdefault(rule.category, None)
        return tuple(seen)


def rules_from_config(config: ErrorHandlingConfig) -> list[MappingRule]:
    """Turn the ``codes`` / ``messages`` / ``http_statuses`` maps into rules."""
    names = list(
        dict.fromkeys([*config.http_statuses, *config.codes, *config.messages])
    )
    return [
        MappingRule(
            category=name,
            status=config.http_statuses.get(name),
            code=config.codes.get(name),
            message=config.messages.get(name),
        )
        for name in names
    ]


def build_registry(
    config: ErrorHandlingConfig,
    app_rules: Iterable[MappingRule] = (),
    builtin_rules: Iterable[MappingRule] = (),
) -> RuleRegistry:
    """Build the process-wide registry.

    Priority order: rules passed by the application, then rules from
    configuration, then the built-in rules.
    """
    rules = [*app_rules, *rules_from_config(config), *builtin_rules]
    logger.debug("Error mapping registry built", rules=len(rules))
    return RuleRegistry(rules)
