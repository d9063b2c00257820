"""Per-request accumulation of Content-Security-Policy source expressions.

Renderers add ``directive -> source expression`` facts while a page is
rendered; ``serialize`` turns them into the header value. Directives and
their expressions keep first-seen order so the header is deterministic.
"""

from __future__ import annotations

import abc
import re
from typing import NamedTuple

from .constants import (
    HEADER_NAME,
    REPORT_ONLY_HEADER_NAME,
    REPORT_URI,
    SOURCE_KEYWORDS,
)

_UNQUOTED_HASH_OR_NONCE = re.compile(r'^(nonce|sha256|sha384|sha512)-\S+$')


class PolicyHeader(NamedTuple):
    name: str
    value: str


class SourceExpressionSet:
    """Ordered set of source expressions for one directive."""

    def __init__(self):
        self._expressions: dict[str, None] = {}

    def add(self, expression: str) -> None:
        self._expressions.setdefault(expression, None)

    def clear(self) -> None:
        self._expressions.clear()

    def __contains__(self, expression):
        return expression in self._expressions

    def __iter__(self):
        return iter(self._expressions)

    def __len__(self):
        return len(self._expressions)

    def __bool__(self):
        return bool(self._expressions)


def quote_source_expression(expression: str) -> str:
    """Single-quote keywords, hashes and nonces given without quotes."""
    if expression in SOURCE_KEYWORDS or _UNQUOTED_HASH_OR_NONCE.match(expression):
        return f"'{expression}'"
    return expression


class PolicyBuilder(abc.ABC):
    """Contract every header builder must satisfy.

    Alternative implementations (a nonce based policy, for instance) are
    plugged in through ``settings.CSP['BUILDER']``.
    """

    @abc.abstractmethod
    def add_source_expression(self, directive: str, expression: str) -> None:
        ...

    @abc.abstractmethod
    def reset_directive(self, directive: str) -> None:
        ...

    @abc.abstractmethod
    def use_report_only(self, report_only: bool) -> None:
        ...

    @abc.abstractmethod
    def set_report_uri(self, uri: str) -> None:
        ...

    @abc.abstractmethod
    def serialize(self) -> PolicyHeader:
        ...


class ContentSecurityPolicyHeaderBuilder(PolicyBuilder):

    def __init__(self):
        self._directives: dict[str, SourceExpressionSet] = {}
        self._report_only = False
        self._report_uri = ''

    @property
    def directives(self):
        return {
            directive: list(expressions)
            for directive, expressions in self._directives.items()
            if expressions
        }

    def add_source_expression(self, directive, expression):
        expression = (expression or '').strip()
        if not expression:
            return
        self._directives.setdefault(directive, SourceExpressionSet()).add(
            quote_source_expression(expression)
        )

    def reset_directive(self, directive):
        if directive in self._directives:
            self._directives[directive].clear()

    def use_report_only(self, report_only):
        self._report_only = bool(report_only)

    def set_report_uri(self, uri):
        self._report_uri = (uri or '').strip()

    def serialize(self):
        name = REPORT_ONLY_HEADER_NAME if self._report_only else HEADER_NAME

        clauses = [
            f'{directive} {" ".join(expressions)}; '
            for directive, expressions in self._directives.items()
            if expressions
        ]
        if not clauses:
            return PolicyHeader(name, '')

        if self._report_uri:
            clauses.append(f'{REPORT_URI} {self._report_uri}; ')

        return PolicyHeader(name, ''.join(clauses).rstrip())
