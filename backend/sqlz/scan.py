"""
Scan targets: caller-owned cells that result columns are written into.

A target is anything with a ``set(value)`` method. ``Var`` is the stock one.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from typing import Any

from sqlz.core.errors import ScanConversionError


class Var:
    """
    Mutable cell bound to one result column.

    - type_: when given, values that are not already instances are converted
      with ``type_(value)``; a non-integral float or Decimal into an int
      type is an error.
    - nullable: when False, scanning NULL is an error.
    """

    __slots__ = ("type_", "nullable", "value", "valid")

    def __init__(self, type_: type | None = None, *, nullable: bool = True) -> None:
        self.type_ = type_
        self.nullable = nullable
        self.value: Any = None
        self.valid = False

    def set(self, value: Any) -> None:
        if value is None:
            if not self.nullable:
                name = self.type_.__name__ if self.type_ is not None else "value"
                raise ScanConversionError(f"converting NULL to {name} is unsupported")
            self.value = None
            self.valid = False
            return
        if self.type_ is not None and not isinstance(value, self.type_):
            value = _convert(value, self.type_)
        self.value = value
        self.valid = True

    def __repr__(self) -> str:
        return f"Var({self.value!r})"


def _convert(value: Any, type_: type) -> Any:
    try:
        converted = type_(value)
    except (TypeError, ValueError, ArithmeticError) as e:
        raise ScanConversionError(
            f"converting {type(value).__name__} ({value!r}) to {type_.__name__}: {e}"
        ) from e
    # int(1.7) == 1: refuse numeric conversions that drop information.
    if issubclass(type_, int) and isinstance(value, (float, Decimal)) and converted != value:
        raise ScanConversionError(
            f"converting {type(value).__name__} ({value!r}) to {type_.__name__}: fractional part would be lost"
        )
    return converted


def assign(targets: Sequence[Any], row: Sequence[Any]) -> None:
    """Store row columns into targets positionally."""
    if len(targets) != len(row):
        raise ScanConversionError(
            f"expected {len(row)} destination arguments in scan, not {len(targets)}"
        )
    for i, (target, value) in enumerate(zip(targets, row)):
        try:
            target.set(value)
        except ScanConversionError as e:
            raise ScanConversionError(f"scan error on column index {i}: {e}") from e
