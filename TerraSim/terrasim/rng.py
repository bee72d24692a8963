"""Seeded pseudo-random generator shared by every stochastic step."""

from __future__ import annotations

_TWO_32 = 4294967296
_INCREMENT = 0x6D2B79F5


class InvalidRangeError(ValueError):
    """Raised when a draw is requested over an empty or malformed range."""


def _to_uint32(value: float) -> int:
    return int(value) % _TWO_32


def _to_int32(value: float) -> int:
    n = int(value) % _TWO_32
    return n - _TWO_32 if n >= 0x80000000 else n


class SeededRandom:
    """Mulberry32 generator.

    The state is kept as a float and the mixing multiplies run in double
    precision, so the produced stream matches the JavaScript formulation of the
    algorithm draw for draw.
    """

    def __init__(self, seed: int) -> None:
        self._state = float(_to_uint32(seed))

    def _next(self) -> float:
        self._state += _INCREMENT
        z = self._state
        z = float(_to_int32(z) ^ (_to_uint32(z) >> 15)) * float(1 | (_to_uint32(z) >> 1))
        mixed = z + float(_to_int32(z) ^ (_to_uint32(z) >> 7)) * float(1 | _to_int32(z))
        z = float(_to_int32(z) ^ _to_int32(mixed))
        return ((_to_int32(z) ^ (_to_uint32(z) >> 14)) % _TWO_32) / _TWO_32

    def next_int(self, min_value: int, max_value: int) -> int:
        """Integer in ``[min_value, max_value]``, both ends inclusive."""
        if min_value > max_value:
            raise InvalidRangeError(
                f"minimum {min_value} must be less than or equal to maximum {max_value}"
            )
        return int(self._next() * (max_value - min_value + 1)) + min_value

    def next_float(self, min_value: float, max_value: float) -> float:
        """Float in ``[min_value, max_value)``."""
        if min_value >= max_value:
            raise InvalidRangeError(f"minimum {min_value} must be less than maximum {max_value}")
        return self._next() * (max_value - min_value) + min_value

    def next_boolean(self, probability: float = 0.5) -> bool:
        if probability < 0.0 or probability > 1.0:
            raise InvalidRangeError(f"probability {probability} must be between 0 and 1")
        return self._next() < probability

    def reseed(self, seed: int) -> None:
        self._state = float(_to_uint32(seed))
