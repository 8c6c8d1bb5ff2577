"""Test fixtures package."""

from .fake_executor import FakeExecutor, column_row, constraint_row, index_row

__all__ = [
    "FakeExecutor",
    "column_row",
    "constraint_row",
    "index_row",
]
