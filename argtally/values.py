"""
Argtally typed values.

A Value wraps one raw token exactly as it appeared on the command line and
converts it lazily, at read time, to one scalar of a closed set:

    string, int32, int64, uint32, uint64, float, double

Conversions are strict:
- the whole token must be consumed (no trailing characters, no underscores);
- integers are base 10 with an optional leading sign and leading whitespace;
- 32-bit integers are parsed as their 64-bit sibling first and then
  range-checked before narrowing;
- floating values accept decimal/exponential syntax and inf/infinity/nan in any
  case (optionally signed), and reject finite literals that overflow;
- float (single precision) results are rounded through a 32-bit float.

Any failure raises ArgumentValueError carrying the raw token and the name of the
requested scalar.

Quick example:
    >>> Value("42").value(Scalar.INT32)
    42
    >>> Value("4.5").value(float)
    4.5
    >>> Value("7up").value(int)
    Traceback (most recent call last):
        ...
    argtally.faults.ArgumentValueError: cannot convert '7up' to int64
"""
import math
import re
import struct
from enum import StrEnum

from .faults import ArgumentValueError, FaultCode, getdoc
from .utils import mirror


class Scalar(StrEnum):
    """
    Closed set of scalar types a Value converts to.

    The builtins str, int and float are accepted wherever a Scalar is expected
    and stand for STRING, INT64 and DOUBLE respectively.
    """
    STRING = "string"
    INT32 = "int32"
    INT64 = "int64"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT = "float"
    DOUBLE = "double"

    @classmethod
    def of(cls, type, /):
        """
        Resolve a type tag (Scalar, its name, or one of str/int/float) to a Scalar.
        """
        if isinstance(type, cls):
            return type
        if type is str:
            return cls.STRING
        if type is int:
            return cls.INT64
        if type is float:
            return cls.DOUBLE
        if isinstance(type, str):
            try:
                return cls(type.lower())
            except ValueError:
                raise ValueError(f"unknown scalar type {type!r}") from None
        raise TypeError(f"scalar type must be a Scalar, str, int or float, not {type!r}")


# Widths for every integer scalar (inclusive bounds).
_BOUNDS = {
    Scalar.INT32: (-2 ** 31, 2 ** 31 - 1),
    Scalar.INT64: (-2 ** 63, 2 ** 63 - 1),
    Scalar.UINT32: (0, 2 ** 32 - 1),
    Scalar.UINT64: (0, 2 ** 64 - 1),
}

# 32-bit targets parse through their 64-bit sibling.
_SIBLINGS = {
    Scalar.INT32: Scalar.INT64,
    Scalar.UINT32: Scalar.UINT64,
}

_INTEGER = re.compile(r"[ \t\n\v\f\r]*[+-]?[0-9]+", re.ASCII)

_FLOATING = re.compile(r"""
    [ \t\n\v\f\r]*
    (?P<sign>[+-]?)
    (?:
        (?P<number>(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)
      | inf(?:inity)?
      | nan
    )
""", re.VERBOSE | re.IGNORECASE | re.ASCII)


class Value:
    """
    One raw command-line token with on-demand typed conversion.

    Values are immutable and compare equal when their raw tokens are equal.
    """
    __slots__ = ("_raw",)

    raw = mirror("raw")

    def __init__(self, raw="", /):
        if not isinstance(raw, str):
            raise TypeError("value token must be a string")
        self._raw = raw

    def value(self, type=str, /):
        """
        Return the token interpreted as the requested scalar.

        Parameters
        - type: Scalar | str | int | float | "int32" | ...
          The target scalar; defaults to the raw string.

        Raises
        - ArgumentValueError when the token cannot be converted.
        """
        match scalar := Scalar.of(type):
            case Scalar.STRING:
                return self._raw
            case Scalar.INT32 | Scalar.INT64 | Scalar.UINT32 | Scalar.UINT64:
                return self._integer(scalar)
            case Scalar.FLOAT | Scalar.DOUBLE:
                return self._floating(scalar)

    def _integer(self, scalar):
        if not _INTEGER.fullmatch(self._raw):
            self._uncastable(scalar)
        try:
            number = int(self._raw)
        except ValueError:
            # Beyond the interpreter's digit limit; far outside every bound.
            self._uncastable(scalar)

        low, high = _BOUNDS[_SIBLINGS.get(scalar, scalar)]
        if not low <= number <= high:
            self._uncastable(scalar)

        # Narrow after the wide parse succeeded.
        low, high = _BOUNDS[scalar]
        if not low <= number <= high:
            self._uncastable(scalar)
        return number

    def _floating(self, scalar):
        if not (match := _FLOATING.fullmatch(self._raw)):
            self._uncastable(scalar)
        number = float(self._raw)

        if match["number"] is not None and math.isinf(number):
            self._uncastable(scalar)

        if scalar is Scalar.FLOAT:
            try:
                number, = struct.unpack("f", struct.pack("f", number))
            except OverflowError:
                self._uncastable(scalar)
        return number

    def _uncastable(self, scalar):
        raise ArgumentValueError(
            "cannot convert %r to %s" % (self._raw, scalar),
            title="uncastable value",
            code=FaultCode.UNCASTABLE_VALUE,
            hint="pass a whole %s value without extra characters" % scalar,
            value=self._raw,
            typename=str(scalar),
            docs=getdoc(FaultCode.UNCASTABLE_VALUE),
        )

    def __eq__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        return self._raw == other._raw

    def __hash__(self):
        return hash((Value, self._raw))

    def __str__(self):
        return self._raw

    def __repr__(self):
        return f"value({self._raw!r})"

    def __rich_repr__(self):
        yield self._raw


__all__ = (
    "Scalar",
    "Value",
)
