"""
Access policy: map (HTTP method, path, identity) to an authorization verdict.

A policy is an ordered list of rules. The first rule whose method and path
pattern match the request decides it; when nothing matches, the request must
at least be authenticated. Evaluation is pure and never raises.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from app.models.user import Role

ANY_METHOD = None
ANY_PATH = "/**"

# "{id}" matches exactly one path segment.
_SEGMENT_VAR = re.compile(r"\{[A-Za-z_][A-Za-z0-9_]*\}")


class Verdict(str, Enum):
    """Outcome of evaluating a request against the policy."""

    ALLOW = "allow"
    DENY_UNAUTHENTICATED = "deny_unauthenticated"
    DENY_FORBIDDEN = "deny_forbidden"


class Identity(Protocol):
    """What the evaluator needs to know about an authenticated caller."""

    @property
    def role(self) -> Role: ...


@dataclass(frozen=True)
class Public:
    """Anyone, authenticated or not."""

    def decide(self, identity: Identity | None) -> Verdict:
        return Verdict.ALLOW


@dataclass(frozen=True)
class AuthenticatedOnly:
    """Any authenticated caller, whatever the role."""

    def decide(self, identity: Identity | None) -> Verdict:
        if identity is None:
            return Verdict.DENY_UNAUTHENTICATED
        return Verdict.ALLOW


@dataclass(frozen=True)
class RequiresRole:
    """Authenticated caller holding exactly this role."""

    role: Role

    def decide(self, identity: Identity | None) -> Verdict:
        if identity is None:
            return Verdict.DENY_UNAUTHENTICATED
        if identity.role != self.role:
            return Verdict.DENY_FORBIDDEN
        return Verdict.ALLOW


Requirement = Public | AuthenticatedOnly | RequiresRole


def compile_path_pattern(pattern: str) -> re.Pattern[str]:
    """
    Turn a route pattern into an anchored regex.

    "/api/users/{id}" matches "/api/users/42" but not "/api/users/42/x";
    a trailing "/**" matches the prefix itself and anything below it.
    """
    if pattern == ANY_PATH:
        return re.compile(r".*")
    suffix = ""
    if pattern.endswith(ANY_PATH):
        pattern = pattern[: -len(ANY_PATH)]
        suffix = r"(?:/.*)?"
    parts = []
    last = 0
    for m in _SEGMENT_VAR.finditer(pattern):
        parts.append(re.escape(pattern[last : m.start()]))
        parts.append(r"[^/]+")
        last = m.end()
    parts.append(re.escape(pattern[last:]))
    return re.compile("".join(parts) + suffix)


@dataclass(frozen=True)
class Rule:
    """One policy entry: method (None for any), path pattern, requirement."""

    method: str | None
    pattern: str
    requirement: Requirement
    _regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.method is not None:
            object.__setattr__(self, "method", self.method.upper())
        object.__setattr__(self, "_regex", compile_path_pattern(self.pattern))

    def matches(self, method: str, path: str) -> bool:
        if self.method is not None and self.method != method.upper():
            return False
        return self._regex.fullmatch(path) is not None


class AccessPolicy:
    """Ordered rule table; first match wins, unmatched requests need authentication."""

    fallback = Rule(ANY_METHOD, ANY_PATH, AuthenticatedOnly())

    def __init__(self, rules: Sequence[Rule]) -> None:
        self._rules: tuple[Rule, ...] = tuple(rules)

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    def match(self, method: str, path: str) -> Rule | None:
        """Return the first rule matching the request, or None."""
        for rule in self._rules:
            if rule.matches(method, path):
                return rule
        return None

    def evaluate(self, method: str, path: str, identity: Identity | None) -> Verdict:
        rule = self.match(method, path) or self.fallback
        return rule.requirement.decide(identity)


# Order is significant: specific /me and /updateUser rules precede /{id}.
USER_MANAGEMENT_POLICY = AccessPolicy(
    [
        Rule(ANY_METHOD, "/api/users/register", Public()),
        Rule("PUT", "/api/users/me", AuthenticatedOnly()),
        Rule("PUT", "/api/users/updateUser/{id}", RequiresRole(Role.ADMIN)),
        Rule("GET", "/api/users", RequiresRole(Role.ADMIN)),
        Rule("DELETE", "/api/users/{id}", RequiresRole(Role.ADMIN)),
        Rule(ANY_METHOD, ANY_PATH, AuthenticatedOnly()),
    ]
)


def evaluate(method: str, path: str, identity: Identity | None) -> Verdict:
    """Evaluate a request against the service's policy."""
    return USER_MANAGEMENT_POLICY.evaluate(method, path, identity)
