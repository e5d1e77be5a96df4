# src/colvis/protocol.py
"""
The visitor lifecycle shared by every column visitor.

    visitor.pre()                      # reset result state
    visitor(index, column[, column2])  # consume one (or more) paired columns
    visitor.post()                     # finalize
    visitor.get_result()               # result artifact

Configuration is fixed at construction; `pre` never touches it.
"""
from typing import Any, Protocol, TypeVar, runtime_checkable


@runtime_checkable
class Visitor(Protocol):
    def pre(self) -> None: ...
    def __call__(self, index, *columns) -> None: ...
    def post(self) -> None: ...
    def get_result(self) -> Any: ...


@runtime_checkable
class Accumulator(Visitor, Protocol):
    """A visitor that can also absorb and drop single observations."""
    def add(self, idx, value) -> None: ...
    def remove(self, value) -> None: ...


V = TypeVar("V", bound=Visitor)

def visit(visitor: V, index, *columns) -> V:
    """Run the full pre -> call -> post lifecycle and return the visitor."""
    visitor.pre()
    visitor(index, *columns)
    visitor.post()
    return visitor
