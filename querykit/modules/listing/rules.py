"""Override rules for sorting and filtering with a default fallback."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy import Select

from querykit.core.enums import SortDirection

Handler = Callable[[Select, str, Any], Select]

SORT = "sort"
FILTER = "filter"
RULE_ATTRIBUTE = "__querykit_rule__"

_ANY = object()


@dataclass(frozen=True)
class RuleSpec:
    """Matching part of a rule, attached to the decorated method."""

    kind: str
    field: str | None = None
    when: Callable[[Any], bool] | None = None

    def matches(self, field: str, argument: Any) -> bool:
        if self.field is not None and self.field != field:
            return False
        return self.when is None or bool(self.when(argument))


@dataclass(frozen=True)
class Rule:
    """A rule spec bound to the handler that applies it."""

    spec: RuleSpec
    handler: Handler


class RuleChain:
    """Try rules in declaration order, falling back to `default`."""

    def __init__(self, rules: Sequence[Rule], default: Handler) -> None:
        self.rules = tuple(rules)
        self.default = default

    def __call__(self, stmt: Select, field: str, argument: Any) -> Select:
        for rule in self.rules:
            if rule.spec.matches(field, argument):
                return rule.handler(stmt, field, argument)
        return self.default(stmt, field, argument)


def sort_rule(
    field: str | None = None,
    direction: SortDirection | str | None = None,
) -> Callable[[Callable[..., Select]], Callable[..., Select]]:
    """Declare a method as a sort override for `field` and optionally one direction.

    The method is called as `method(stmt, field, direction)`.
    """
    when = None
    if direction is not None:
        expected = SortDirection(direction)
        when = lambda value: value == expected  # noqa: E731
    return _mark(RuleSpec(kind=SORT, field=field, when=when))


def filter_rule(
    field: str | None = None,
    *,
    value: Any = _ANY,
    when: Callable[[Any], bool] | None = None,
) -> Callable[[Callable[..., Select]], Callable[..., Select]]:
    """Declare a method as a filter override.

    Matches on `field`, then on an exact `value` or a `when(value)` predicate.
    The method is called as `method(stmt, field, value)`.
    """
    if value is not _ANY and when is not None:
        raise TypeError("filter_rule accepts either value or when, not both")
    if value is not _ANY:
        expected = value
        when = lambda candidate: type(candidate) is type(expected) and candidate == expected  # noqa: E731
    return _mark(RuleSpec(kind=FILTER, field=field, when=when))


def _mark(spec: RuleSpec) -> Callable[[Callable[..., Select]], Callable[..., Select]]:
    def decorator(method: Callable[..., Select]) -> Callable[..., Select]:
        setattr(method, RULE_ATTRIBUTE, spec)
        return method

    return decorator


def collect_rule_names(mro: Iterable[type], kind: str) -> tuple[str, ...]:
    """Names of rule methods of `kind`, most derived class first, in declaration order."""
    seen: set[str] = set()
    names: list[str] = []
    for klass in mro:
        for name, attribute in vars(klass).items():
            if name in seen:
                continue
            seen.add(name)
            spec = getattr(attribute, RULE_ATTRIBUTE, None)
            if isinstance(spec, RuleSpec) and spec.kind == kind:
                names.append(name)
    return tuple(names)


def bind_rules(owner: object, names: Iterable[str]) -> list[Rule]:
    """Bind collected rule methods to `owner`."""
    rules = []
    for name in names:
        method = getattr(owner, name)
        rules.append(Rule(spec=getattr(method, RULE_ATTRIBUTE), handler=method))
    return rules
