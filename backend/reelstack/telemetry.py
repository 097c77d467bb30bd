"""Server-side telemetry events."""
import logging
from dataclasses import asdict, dataclass
from typing import Any, Protocol


logger = logging.getLogger(__name__)


class TelemetrySink(Protocol):
    """Protocol for telemetry sinks."""

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        ...


class LoggingTelemetrySink:
    """Default sink that logs telemetry events."""

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        logger.info("TELEMETRY %s: %s", event_name, data)


@dataclass
class InitServedEvent:
    player_id: str
    balance: float
    config_hash: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class SpinProcessedEvent:
    """spin_processed: one per freshly evaluated spin, never on replay."""

    player_id: str
    client_request_id: str
    round_id: str
    bet_amount: float
    total_win: float
    win_line_count: int
    bonus_triggered: bool
    balance_after: float
    lock_acquire_ms: float
    config_hash: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class SpinRejectedEvent:
    player_id: str
    client_request_id: str | None
    reason: str  # "ROUND_IN_PROGRESS" | "INSUFFICIENT_FUNDS" | ...
    lock_acquire_ms: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class TelemetryService:
    """Service for emitting server telemetry events."""

    def __init__(self, sink: TelemetrySink | None = None):
        self._sink = sink or LoggingTelemetrySink()
        self._sink_errors = 0

    def set_sink(self, sink: TelemetrySink) -> None:
        """Set the telemetry sink (useful for testing)."""
        self._sink = sink

    def _safe_emit(self, event_name: str, data: dict[str, Any]) -> None:
        """Sink failures MUST NOT break HTTP requests."""
        try:
            self._sink.emit(event_name, data)
        except Exception as e:
            self._sink_errors += 1
            logger.warning(
                "Telemetry sink error (count=%d): %s - %s",
                self._sink_errors,
                event_name,
                str(e),
            )

    def emit_init_served(self, event: InitServedEvent) -> None:
        self._safe_emit("init_served", event.to_dict())

    def emit_spin_processed(self, event: SpinProcessedEvent) -> None:
        self._safe_emit("spin_processed", event.to_dict())

    def emit_spin_rejected(self, event: SpinRejectedEvent) -> None:
        self._safe_emit("spin_rejected", event.to_dict())


# Global instance
telemetry_service = TelemetryService()
