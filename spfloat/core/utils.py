"""General utilities, such as exception classes."""


# spfloat-specific exceptions

class SpfloatError(Exception):
    """Base spfloat error."""

class RoundingError(SpfloatError):
    """Rounding error, such as attempting to round NaN."""

class PrecisionError(RoundingError):
    """Insufficient precision to perform rounding."""

class DomainError(SpfloatError, ValueError):
    """An operation was called outside of its documented input domain.
    This is a programmer error, not a numerical edge case: numerical
    domain violations (like the log of a negative number) produce NaN instead.
    """


# Useful things

def bitmask(n: int) -> int:
    """Produces a bitmask of n 1s if n is positive, or n 0s if n is negative."""
    if n >= 0:
        return (1 << n) - 1
    else:
        return -1 << -n

def maskbits(x: int, n:int) -> int:
    """Mask x & bitmask(n)"""
    if n >= 0:
        return x & ((1 << n) - 1)
    else:
        return x & (-1 << -n)

def is_even_for_rounding(c, exp):
    """General-purpose tiebreak used when rounding to even.
    If the significand is less than two bits,
    decide evenness based on the representation of the exponent.
    """
    if c.bit_length() > 1:
        return c & 1 == 0
    else:
        return exp & 1 == 0

def shift(x: int, n: int) -> int:
    """Multiply x by 2**n, truncating toward negative infinity if n is negative."""
    if n >= 0:
        return x << n
    else:
        return x >> -n
