"""
Built-in operations a generic can shadow.

Defining a generic with the name of a built-in is allowed.
If the generic's formal shape matches the built-in's, the built-in
becomes the generic's ANY default. Otherwise the built-in is masked and
calls on plain values fail until a fallback is registered.
"""

from dataclasses import dataclass
from itertools import chain
from typing import Any, Callable, Dict, List, Sequence, Tuple


@dataclass(frozen=True)
class Builtin:
    name: str
    parameters: Tuple[str, ...]
    implementation: Callable[..., Any]


def _rev(x):
    if isinstance(x, str):
        return x[::-1]
    return list(reversed(x))


def _sequence(nvec: Sequence[int], *args) -> List[int]:
    """Concatenate the integer ranges 1..n for every n in nvec."""
    if isinstance(nvec, int):
        nvec = [nvec]
    return list(chain.from_iterable(range(1, n + 1) for n in nvec))


def _show(obj) -> str:
    return repr(obj)


BUILTINS: Dict[str, Builtin] = {
    b.name: b
    for b in (
        Builtin("length", ("x",), len),
        Builtin("rev", ("x",), _rev),
        Builtin("sequence", ("nvec", "..."), _sequence),
        Builtin("show", ("object",), _show),
    )
}
