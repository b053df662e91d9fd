"""Strict mocks: every call fails unless the test overrides it."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterator
from unittest import mock

from .errors import StrictMockError


def _callable_mocks(obj: Any) -> Iterator[tuple[str, mock.NonCallableMock]]:
    if isinstance(obj, Mapping):
        items = obj.items()
    else:
        # Skip the mock's own API (return_value, assert_called, ...).
        own_api = set(dir(type(obj))) if isinstance(obj, mock.NonCallableMock) else set()
        items = (
            (name, getattr(obj, name))
            for name in dir(obj)
            if not name.startswith('_') and name not in own_api
        )
    for name, value in items:
        if isinstance(value, mock.NonCallableMock) and callable(value):
            yield name, value


def make_mock_object_strict(obj: Any) -> list[str]:
    """Make each callable mock on ``obj`` raise StrictMockError(name).

    ``obj`` is a mapping of names to mocks or an object whose public
    attributes are mocks (e.g. ``Mock(spec=SomeClass)``). A test opts a
    member back in by assigning its ``side_effect`` (``None`` restores
    ``return_value``). Returns the names that were made strict.
    """
    names = []
    for name, member in _callable_mocks(obj):
        member.side_effect = StrictMockError(name)
        names.append(name)
    return names
