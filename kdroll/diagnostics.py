"""Structured diagnostics for recoverable generator conditions."""
import logging
from dataclasses import dataclass
from typing import Any, Protocol

from kdroll.errors import ERROR_SEVERITY, ErrorCode


logger = logging.getLogger(__name__)


class DiagnosticSink(Protocol):
    """Protocol for diagnostic sinks."""

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        """Emit a diagnostic event."""
        ...


class LoggingDiagnosticSink:
    """Default sink that logs diagnostic events at their code's severity."""

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        """Log diagnostic event."""
        try:
            level = ERROR_SEVERITY[ErrorCode(data.get("code"))]
        except ValueError:
            level = logging.INFO
        logger.log(level, "DIAGNOSTIC %s: %s", event_name, data)


@dataclass
class InvalidSeedEvent:
    """invalid_seed: a seed was rejected and replaced by a random one."""

    seed: str  # repr of the rejected value
    reason: str
    replacement_length: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for emission."""
        return {
            "code": ErrorCode.INVALID_SEED.value,
            "seed": self.seed,
            "reason": self.reason,
            "replacement_length": self.replacement_length,
        }


@dataclass
class EntropyFallbackEvent:
    """entropy_fallback: secure entropy failed, a non-secure fill was used."""

    source: str
    reason: str
    word_count: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for emission."""
        return {
            "code": ErrorCode.ENTROPY_FALLBACK.value,
            "source": self.source,
            "reason": self.reason,
            "word_count": self.word_count,
        }


@dataclass
class InvalidCapacityEvent:
    """invalid_capacity: a history size was rejected."""

    requested: str  # repr of the rejected value
    capacity: int  # capacity kept

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for emission."""
        return {
            "code": ErrorCode.INVALID_CAPACITY.value,
            "requested": self.requested,
            "capacity": self.capacity,
        }


@dataclass
class InvalidSidesEvent:
    """invalid_sides: a die roll was requested with a non-numeric side count."""

    sides: str  # repr of the rejected value

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for emission."""
        return {
            "code": ErrorCode.INVALID_SIDES.value,
            "sides": self.sides,
        }


class DiagnosticsService:
    """Service for emitting generator diagnostics."""

    def __init__(self, sink: DiagnosticSink | None = None):
        self._sink = sink or LoggingDiagnosticSink()
        self._sink_errors = 0  # Counter for sink failures

    @property
    def sink_errors(self) -> int:
        """Number of emissions the sink failed to accept."""
        return self._sink_errors

    def set_sink(self, sink: DiagnosticSink) -> None:
        """Set the diagnostic sink (useful for testing)."""
        self._sink = sink

    def _safe_emit(self, event_name: str, data: dict[str, Any]) -> None:
        """
        Emit event with exception safety.

        Sink failures MUST NOT break a draw.
        """
        try:
            self._sink.emit(event_name, data)
        except Exception as e:
            self._sink_errors += 1
            logger.warning(
                "Diagnostic sink error (count=%d): %s - %s",
                self._sink_errors,
                event_name,
                str(e),
            )

    def emit_invalid_seed(self, event: InvalidSeedEvent) -> None:
        """Emit invalid_seed event."""
        self._safe_emit("invalid_seed", event.to_dict())

    def emit_entropy_fallback(self, event: EntropyFallbackEvent) -> None:
        """Emit entropy_fallback event."""
        self._safe_emit("entropy_fallback", event.to_dict())

    def emit_invalid_capacity(self, event: InvalidCapacityEvent) -> None:
        """Emit invalid_capacity event."""
        self._safe_emit("invalid_capacity", event.to_dict())

    def emit_invalid_sides(self, event: InvalidSidesEvent) -> None:
        """Emit invalid_sides event."""
        self._safe_emit("invalid_sides", event.to_dict())


# Global instance
diagnostics_service = DiagnosticsService()
