"""Mersenne Twister (MT19937) uniform distribution generator."""
import logging
import math
import numbers
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from kdroll.diagnostics import DiagnosticsService, InvalidSeedEvent, diagnostics_service
from kdroll.logic.number import floating_point_fix
from kdroll.logic.rng import (
    MAX_SAFE_INTEGER,
    UINT32_MASK,
    EntropySource,
    RNGBase,
    Seed,
    create_random_seed,
)


logger = logging.getLogger(__name__)

# === MT19937 parameters ===
N = 624
M = 397
MATRIX_A = 0x9908B0DF
UPPER_MASK = 0x80000000
LOWER_MASK = 0x7FFFFFFF

INIT_MULTIPLIER = 1812433253
ARRAY_MULTIPLIER_1 = 1664525
ARRAY_MULTIPLIER_2 = 1566083941

# 2**-53, corrected once
_INV_2_53 = floating_point_fix(1.0 / 9007199254740992.0)


def normalize_seed_component(value: object) -> int | None:
    """
    Normalize one seed value to an unsigned safe integer.

    Negative values lose their sign and fractions round half-up
    (``-456.789`` becomes ``457``). Returns None for booleans, non-numbers,
    NaN, infinities, and anything above MAX_SAFE_INTEGER.
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return None
    if isinstance(value, numbers.Integral):
        normalized = abs(int(value))
    else:
        magnitude = abs(float(value))
        if not math.isfinite(magnitude) or magnitude > MAX_SAFE_INTEGER:
            return None
        normalized = int(Decimal(magnitude).quantize(Decimal(1), rounding=ROUND_HALF_UP))
    if normalized > MAX_SAFE_INTEGER:
        return None
    return normalized


class MersenneTwister(RNGBase):
    """
    Mersenne Twister uniform distribution random number generator.

    Seeds may be a single integer or a sequence of integers of any non-zero
    length. Without a seed, or with one that fails validation, the generator
    seeds itself from a random array drawn from ``entropy``.
    """

    def __init__(
        self,
        seed: object = None,
        entropy: EntropySource | None = None,
        diagnostics: DiagnosticsService | None = None,
    ):
        self._entropy = entropy
        self._diagnostics = diagnostics or diagnostics_service
        self._mt: list[int] = [0] * N
        self._mti = N
        self._seed: Seed = 0
        self._init(seed)

    def seed(self, value: object = None) -> Seed:
        """
        Return the current seed, or re-initialize with ``value`` first.

        Args:
            value: Integer or sequence of integers. ``None`` only reads.

        Returns:
            The seed actually applied after normalization (a random seed
            array if ``value`` was rejected).
        """
        if value is not None:
            self._init(value)
        if isinstance(self._seed, list):
            return list(self._seed)
        return self._seed

    def int32(self) -> int:
        """Generate one tempered unsigned 32-bit integer."""
        if self._mti >= N:
            self._twist()

        y = self._mt[self._mti]
        self._mti += 1

        y ^= y >> 11
        y ^= (y << 7) & 0x9D2C5680
        y ^= (y << 15) & 0xEFC60000
        y ^= y >> 18
        return y & UINT32_MASK

    def random(self) -> float:
        """Generate a 53-bit random real in the interval [0, 1)."""
        fix = floating_point_fix
        a = self.int32() >> 5
        b = self.int32() >> 6
        x = fix(a * 67108864.0 + b)
        result = fix(x * _INV_2_53)
        if result >= 1.0:
            # Correction rounded 0.999999... up; the raw product is below 1
            result = x * _INV_2_53
        return result

    next_uniform = random

    # === Initialization ===

    def _init(self, seed: object) -> None:
        if seed is None:
            self._init_random()
            return

        if isinstance(seed, numbers.Real) and not isinstance(seed, bool):
            normalized = normalize_seed_component(seed)
            if normalized is None:
                self._reject(seed, "Seed integer is unsafe.")
                return
            self._seed = normalized
            self._init_genrand(normalized)
            return

        if isinstance(seed, Sequence) and not isinstance(seed, (str, bytes, bytearray)):
            if len(seed) == 0:
                self._reject(seed, "Seed array can not be empty.")
                return
            components = [normalize_seed_component(value) for value in seed]
            if any(value is None for value in components):
                self._reject(seed, "Seed array can not contain unsafe integers.")
                return
            self._seed = components
            self._init_by_array(components)
            return

        self._reject(seed, f"Unsupported seed type {type(seed).__name__}.")

    def _reject(self, seed: object, reason: str) -> None:
        """Replace a rejected seed with a random one and report it."""
        replacement = self._init_random()
        self._diagnostics.emit_invalid_seed(
            InvalidSeedEvent(
                seed=repr(seed),
                reason=reason,
                replacement_length=len(replacement),
            )
        )

    def _init_random(self) -> list[int]:
        seed = create_random_seed(self._entropy, self._diagnostics)
        logger.debug("Seeding from random array of length %d", len(seed))
        self._seed = seed
        self._init_by_array(seed)
        return seed

    def _init_genrand(self, seed: int) -> None:
        """Initialize the state vector from a single integer."""
        mt = self._mt
        mt[0] = seed & UINT32_MASK
        for i in range(1, N):
            s = mt[i - 1] ^ (mt[i - 1] >> 30)
            mt[i] = (INIT_MULTIPLIER * s + i) & UINT32_MASK
        self._mti = N

    def _init_by_array(self, key: list[int]) -> None:
        """
        Initialize the state vector from an array of integers.

        Each distinct array shorter than 624 gives a distinct initial
        state. The baseline vector comes from the array's first element.
        """
        self._init_genrand(key[0])
        mt = self._mt
        key_length = len(key)
        i, j = 1, 0

        for _ in range(max(N, key_length)):
            s = mt[i - 1] ^ (mt[i - 1] >> 30)
            mt[i] = ((mt[i] ^ ((s * ARRAY_MULTIPLIER_1) & UINT32_MASK)) + key[j] + j) & UINT32_MASK
            i += 1
            j += 1
            if i >= N:
                mt[0] = mt[N - 1]
                i = 1
            if j >= key_length:
                j = 0

        for _ in range(N - 1):
            s = mt[i - 1] ^ (mt[i - 1] >> 30)
            mt[i] = ((mt[i] ^ ((s * ARRAY_MULTIPLIER_2) & UINT32_MASK)) - i) & UINT32_MASK
            i += 1
            if i >= N:
                mt[0] = mt[N - 1]
                i = 1

        # An all-zero vector never leaves zero
        if not any(mt):
            mt[0] = UPPER_MASK
        self._mti = N

    def _twist(self) -> None:
        """Regenerate all N words of the state vector."""
        mt = self._mt
        for kk in range(N - M):
            y = (mt[kk] & UPPER_MASK) | (mt[kk + 1] & LOWER_MASK)
            mt[kk] = mt[kk + M] ^ (y >> 1) ^ (MATRIX_A if y & 1 else 0)
        for kk in range(N - M, N - 1):
            y = (mt[kk] & UPPER_MASK) | (mt[kk + 1] & LOWER_MASK)
            mt[kk] = mt[kk + (M - N)] ^ (y >> 1) ^ (MATRIX_A if y & 1 else 0)
        y = (mt[N - 1] & UPPER_MASK) | (mt[0] & LOWER_MASK)
        mt[N - 1] = mt[M - 1] ^ (y >> 1) ^ (MATRIX_A if y & 1 else 0)
        self._mti = 0
