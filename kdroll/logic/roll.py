"""Random number manager combining generator, history and statistics."""
import math
import numbers
import threading
from collections.abc import Sequence

from kdroll.diagnostics import DiagnosticsService, InvalidSidesEvent, diagnostics_service
from kdroll.logic import number, stats
from kdroll.logic.gaussian import gaussian
from kdroll.logic.history import BoundedHistory
from kdroll.logic.number import KDNumber, Range
from kdroll.logic.rng import EntropySource, Seed, create_random_seed
from kdroll.logic.uniform import MersenneTwister


class KDRoll:
    """
    Pseudorandom number manager.

    Implements:
    - Mersenne Twister uniform draws
    - Box-Muller gaussian draws with skew
    - n-sided die rolls
    - History of variable max size (default 1000)
    - Elementary statistics over the history or a given sequence

    Every draw is recorded in the history. Re-seeding clears it. Calls on
    one instance are serialized.
    """

    def __init__(
        self,
        seed: object = None,
        *,
        entropy: EntropySource | None = None,
        diagnostics: DiagnosticsService | None = None,
        max_history: int | None = None,
    ):
        self._entropy = entropy
        self._diagnostics = diagnostics or diagnostics_service
        self._lock = threading.RLock()
        self._uniform = MersenneTwister(
            seed, entropy=entropy, diagnostics=self._diagnostics
        )
        self._history = BoundedHistory(max_history, diagnostics=self._diagnostics)

    # === Seed and history ===

    def seed(self, value: object = None) -> Seed:
        """
        Return the current seed, or re-seed first when ``value`` is given.

        Re-seeding always clears the history.
        """
        with self._lock:
            if value is not None:
                self._history.clear()
                self._uniform.seed(value)
            return self._uniform.seed()

    def history(self) -> list[float]:
        """Copy of the history, oldest first."""
        with self._lock:
            return self._history.snapshot()

    def max_history(self, size: int | None = None) -> int:
        """Get, or set then get, the maximum history size."""
        with self._lock:
            if size is None:
                return self._history.get_capacity()
            return self._history.set_capacity(size)

    def clear_history(self) -> None:
        """Empty the history but keep the current max size."""
        with self._lock:
            self._history.clear()

    # === Draws ===

    def uniform(self) -> float:
        """Uniformly distributed real in [0, 1)."""
        with self._lock:
            rand = self._uniform.random()
            self._history.push(rand)
            return rand

    def random(self) -> float:
        """Alias for ``uniform()``."""
        return self.uniform()

    def gaussian(self, skew: float = 0) -> float:
        """
        Gaussian distributed real in [0, 1].

        Args:
            skew: In [-1, 1]. Negative values skew RIGHT, positive LEFT.
        """
        with self._lock:
            rand = gaussian(self._uniform, skew, resample_source=self._fresh_generator)
            self._history.push(rand)
            return rand

    def d(self, sides: float) -> int | float:
        """
        Roll an n-sided die.

        A uniform draw is scaled to [1, sides] and rounded to a whole number.
        Decimals in ``sides`` are ignored. A non-numeric ``sides`` emits an
        invalid_sides diagnostic and returns NaN without touching the
        history.
        """
        if (
            isinstance(sides, bool)
            or not isinstance(sides, numbers.Real)
            or not math.isfinite(sides)
        ):
            self._diagnostics.emit_invalid_sides(InvalidSidesEvent(sides=repr(sides)))
            return math.nan

        with self._lock:
            num = int(KDNumber(self._uniform.random()).scale(1, int(sides)).round(0))
            self._history.push(num)
            return num

    def _fresh_generator(self) -> MersenneTwister:
        return MersenneTwister(entropy=self._entropy, diagnostics=self._diagnostics)

    # === Statistics ===

    def mean(self, arr: Sequence[float] | None = None) -> float:
        """Mean of ``arr``, or of the history when omitted."""
        return stats.mean(self.history() if arr is None else arr)

    def median(self, arr: Sequence[float] | None = None) -> float:
        """Median of ``arr``, or of the history when omitted."""
        return stats.median(self.history() if arr is None else arr)

    def modes(self, arr: Sequence[float] | None = None) -> list[float]:
        """Modes of ``arr``, or of the history when omitted."""
        return stats.modes(self.history() if arr is None else arr)

    def standard_deviation(self, arr: Sequence[float] | None = None) -> float:
        """Normalized [0, 1] standard deviation of ``arr`` or the history."""
        return stats.standard_deviation(self.history() if arr is None else arr)

    # === Conveniences ===

    @staticmethod
    def quick_random() -> float:
        """One uniform draw from a randomly seeded manager."""
        return KDRoll().random()

    @staticmethod
    def quick_d(sides: float) -> int | float:
        """One die roll from a randomly seeded manager."""
        return KDRoll().d(sides)

    @staticmethod
    def create_random_seed() -> list[int]:
        """Random seed array of random length (20 to 623 words by default)."""
        return create_random_seed()

    @staticmethod
    def scale(value: float, r1: Range, r2: Range) -> float:
        """Scale a value from range ``r1`` to range ``r2``."""
        return number.scale(value, r1, r2)

    @staticmethod
    def clip(value: float, value_range: Range) -> float:
        """Limit a value to ``value_range``."""
        return number.clip(value, value_range)

    @staticmethod
    def round(value: float, places: int = 0) -> float:
        """Round half-up to ``places`` decimals."""
        return number.round_half_up(value, places)
