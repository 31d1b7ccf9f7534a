"""Draw interface, entropy sources and random seed creation."""
import random
import secrets
from abc import ABC, abstractmethod
from typing import Protocol

from kdroll.config import settings
from kdroll.diagnostics import DiagnosticsService, EntropyFallbackEvent, diagnostics_service
from kdroll.errors import EntropyUnavailableError


# Largest integer a double represents exactly (2**53 - 1)
MAX_SAFE_INTEGER = 9007199254740991

UINT32_MASK = 0xFFFFFFFF

Seed = int | list[int]


class RNGBase(ABC):
    """Minimal draw capability consumed by the Gaussian transform."""

    @abstractmethod
    def random(self) -> float:
        """Return random float in [0, 1)."""
        pass


class SystemRNG(RNGBase):
    """
    Uniform source backed by the OS secure random facility.

    Not reproducible; no seed.
    """

    def random(self) -> float:
        return secrets.randbits(53) / (2**53)


class EntropySource(Protocol):
    """Protocol for sources of random 32-bit words used to seed generators."""

    def words(self, count: int) -> list[int]:
        """
        Return ``count`` unsigned 32-bit integers.

        Raises:
            EntropyUnavailableError: if the source cannot deliver.
        """
        ...


class SystemEntropySource:
    """Secure entropy from the operating system."""

    def words(self, count: int) -> list[int]:
        try:
            data = secrets.token_bytes(4 * count)
        except (NotImplementedError, OSError) as e:
            raise EntropyUnavailableError(f"OS entropy unavailable: {e}") from e
        return [
            int.from_bytes(data[i : i + 4], "little") for i in range(0, len(data), 4)
        ]


class PlatformEntropySource:
    """Non-secure fallback fill from the platform pseudo-random generator."""

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng or random.Random()

    def words(self, count: int) -> list[int]:
        return [self._rng.getrandbits(32) for _ in range(count)]


def _draw_seed(source: EntropySource) -> list[int]:
    low = settings.random_seed_min_length
    high = settings.random_seed_max_length
    length = low + source.words(1)[0] % (high - low + 1)
    return [word & UINT32_MASK for word in source.words(length)]


def create_random_seed(
    entropy: EntropySource | None = None,
    diagnostics: DiagnosticsService | None = None,
) -> list[int]:
    """
    Generate a random seed array of random length.

    Uses ``entropy`` (secure OS entropy by default). If it reports
    unavailability, falls back to a non-secure platform fill and emits an
    entropy_fallback diagnostic.

    Returns:
        Between ``settings.random_seed_min_length`` and
        ``settings.random_seed_max_length`` unsigned 32-bit integers.
    """
    source = entropy or SystemEntropySource()
    try:
        return _draw_seed(source)
    except EntropyUnavailableError as e:
        words = _draw_seed(PlatformEntropySource())
        (diagnostics or diagnostics_service).emit_entropy_fallback(
            EntropyFallbackEvent(
                source=type(source).__name__,
                reason=e.message,
                word_count=len(words),
            )
        )
        return words
