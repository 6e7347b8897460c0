#!/usr/bin/env python3

"""Base class for UI test cases run by the suite runner."""

# === STANDARD LIBRARY IMPORTS ===
from typing import TYPE_CHECKING, ClassVar

# === LOCAL IMPORTS ===
from core.exceptions import TestSkipped

if TYPE_CHECKING:
    from suites.context import WorkerContext


class UITestCase:
    """
    One scenario. ``execute`` raises ``AssertionError`` (or any error) to fail,
    ``TestSkipped`` to skip, and returns normally to pass.

    ``invocation_count`` runs the scenario several times per browser;
    ``success_percentage`` is the share of those runs that must pass.
    """

    name: ClassVar[str] = ""
    title: ClassVar[str] = ""
    description: ClassVar[str] = ""
    priority: ClassVar[int] = 0
    invocation_count: ClassVar[int] = 1
    success_percentage: ClassVar[int] = 100

    def execute(self, ctx: "WorkerContext") -> None:
        raise NotImplementedError

    @staticmethod
    def require(condition: bool, message: str) -> None:
        if not condition:
            raise AssertionError(message)

    @staticmethod
    def skip(reason: str) -> None:
        raise TestSkipped(reason)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, priority={self.priority})"
