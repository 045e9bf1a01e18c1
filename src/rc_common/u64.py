"""Unsigned 64-bit integer arithmetic.

All prices, token amounts and reward amounts are u64 values held in Python
ints. Every operation here clamps to [0, U64_MAX] instead of wrapping.
"""

U64_MAX = (1 << 64) - 1

BASIS_POINTS_DENOMINATOR = 10_000


def is_u64(value: int) -> bool:
    return 0 <= value <= U64_MAX


def saturating_sub(a: int, b: int) -> int:
    return max(a - b, 0)


def saturating_mul(a: int, b: int) -> int:
    return min(a * b, U64_MAX)


def saturating_pow(base: int, exponent: int) -> int:
    """Saturating power, used to scale human amounts by 10**decimals."""
    result = 1
    for _ in range(exponent):
        result = saturating_mul(result, base)
        if result == U64_MAX:
            break
    return result


def apply_basis_points(amount: int, basis_points: int) -> int:
    """amount * bps / 10000 with a saturating multiply, floored.

    Once amount * bps exceeds U64_MAX the product clamps first, so the
    result is U64_MAX // 10000 rather than the exact share.
    """
    return saturating_mul(amount, basis_points) // BASIS_POINTS_DENOMINATOR
