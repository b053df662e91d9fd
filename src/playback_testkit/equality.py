"""Deep equality with pluggable domain testers and named matchers.

Custom testers are consulted, in registration order, before any
structural comparison; the first tester that returns a bool decides.
A tester returning None defers to the next one and finally to the
built-in rules.
"""
from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any, Callable, Optional

from .comparators import compare_references
from .element_diff import MatcherResult, diff_nodes, is_element, to_equal_element

EqualityTester = Callable[[Any, Any], Optional[bool]]
Matcher = Callable[[Any, Any], MatcherResult]


class EqualityRegistry:
    """Holds custom equality testers and named matchers for one test."""

    def __init__(self) -> None:
        self._testers: list[EqualityTester] = []
        self._matchers: dict[str, Matcher] = {}

    def add_tester(self, tester: EqualityTester) -> None:
        self._testers.append(tester)

    def add_matcher(self, name: str, matcher: Matcher) -> None:
        self._matchers[name] = matcher

    @property
    def testers(self) -> list[EqualityTester]:
        return list(self._testers)

    @property
    def matcher_names(self) -> list[str]:
        return sorted(self._matchers)

    def matcher(self, name: str) -> Matcher:
        try:
            return self._matchers[name]
        except KeyError:
            raise KeyError(f'No matcher registered as {name!r}') from None

    def deep_equal(self, a: Any, b: Any) -> bool:
        for tester in self._testers:
            verdict = tester(a, b)
            if verdict is not None:
                return bool(verdict)

        if is_element(a) or is_element(b):
            return is_element(a) and is_element(b) and diff_nodes(a, b) is None

        if isinstance(a, Mapping) and isinstance(b, Mapping):
            if a.keys() != b.keys():
                return False
            return all(self.deep_equal(a[k], b[k]) for k in a)

        if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)):
            if type(a) is not type(b) or len(a) != len(b):
                return False
            return all(self.deep_equal(x, y) for x, y in zip(a, b))

        if _is_dataclass_instance(a) and _is_dataclass_instance(b):
            if type(a) is not type(b):
                return False
            return all(
                self.deep_equal(getattr(a, f.name), getattr(b, f.name))
                for f in dataclasses.fields(a)
                if f.compare
            )

        return a == b

    def assert_equal(self, actual: Any, expected: Any) -> None:
        if not self.deep_equal(actual, expected):
            raise AssertionError(f'Expected {actual!r} to equal {expected!r}.')

    def assert_matches(self, name: str, actual: Any, expected: Any) -> None:
        result = self.matcher(name)(actual, expected)
        if not result.passed:
            raise AssertionError(result.message)


def _is_dataclass_instance(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def default_registry() -> EqualityRegistry:
    """Registry with the segment-reference tester and the element matcher."""
    registry = EqualityRegistry()
    registry.add_tester(compare_references)
    registry.add_matcher('to_equal_element', to_equal_element)
    return registry
