## shared numeric tolerances for polyCSG
## Copyright (c) 2026 the polyCSG authors

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""Shared tolerance constants and comparators.

Every epsilon-sensitive decision in polyCSG reads its threshold from
this module *at call time*, so the values below may be adjusted
globally with :func:`configure` or temporarily with
:func:`overridden`::

    from polycsg import tolerance

    with tolerance.overridden(plane_epsilon=1e-4):
        result = a.subtract(b)

Always refer to the values as ``tolerance.epsilon`` and friends, never
``from polycsg.tolerance import epsilon``, or reconfiguration will not
be seen.

``epsilon``
    approximate equality of coordinates, vectors and vertices
``plane_epsilon``
    half-thickness of a plane when classifying points as front, back
    or coplanar; the main robustness knob for booleans
``weld_precision``
    cell size used when welding near-duplicate vertices and when
    matching edges for watertightness
"""

from __future__ import annotations

import math
from contextlib import contextmanager
from typing import Dict, Iterator

epsilon = 1e-8
plane_epsilon = 1e-5
weld_precision = 1e-8

_DEFAULTS = {
    'epsilon': epsilon,
    'plane_epsilon': plane_epsilon,
    'weld_precision': weld_precision,
}


def current() -> Dict[str, float]:
    """return a dict of the tolerance values currently in effect"""
    return {name: globals()[name] for name in _DEFAULTS}


def configure(**values: float) -> Dict[str, float]:
    """Set one or more tolerances by name, returning the previous values.

    Unknown names raise ``ValueError``, as do non-positive values.
    """
    for name, value in values.items():
        if name not in _DEFAULTS:
            raise ValueError(f'unknown tolerance {name!r}')
        if not isinstance(value, (int, float)) or not value > 0:
            raise ValueError(f'tolerance {name} must be a positive number, got {value!r}')
    previous = current()
    for name, value in values.items():
        globals()[name] = float(value)
    return previous


def reset() -> None:
    """restore the built-in default tolerances"""
    configure(**_DEFAULTS)


@contextmanager
def overridden(**values: float) -> Iterator[Dict[str, float]]:
    """temporarily replace tolerances inside a ``with`` block"""
    previous = configure(**values)
    try:
        yield current()
    finally:
        configure(**previous)


def close(a: float, b: float, tol: float | None = None) -> bool:
    """return True if ``a`` and ``b`` differ by no more than ``tol``"""
    if tol is None:
        tol = epsilon
    return abs(a - b) <= tol


def is_zero(a: float, tol: float | None = None) -> bool:
    if tol is None:
        tol = epsilon
    return abs(a) <= tol


def quantize(value: float, precision: float | None = None) -> int:
    """integer cell index of ``value`` on a grid of size ``precision``"""
    if precision is None:
        precision = weld_precision
    return int(math.floor(value / precision))


__all__ = [
    'epsilon',
    'plane_epsilon',
    'weld_precision',
    'current',
    'configure',
    'reset',
    'overridden',
    'close',
    'is_zero',
    'quantize',
]
