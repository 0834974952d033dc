import json
import time
from collections.abc import Callable
from dataclasses import dataclass

import psycopg
from psycopg import sql

from invoicedesk.config.settings import Settings
from invoicedesk.database.connection import listen_connection
from invoicedesk.logging.logger import Log

# Must match the pg_notify channel in schema.sql.
CHANGE_CHANNEL = "invoices_changed"

CHANGE_TYPES = frozenset({"INSERT", "UPDATE", "DELETE"})
RESYNC = "RESYNC"


@dataclass(frozen=True)
class ChangeEvent:
    """A row-level change announced by the invoices trigger.

    ``RESYNC`` is emitted by the listener itself after each (re)subscription.
    """

    type: str
    record_id: str | None = None

    @classmethod
    def from_payload(cls, payload: str) -> "ChangeEvent":
        """Parse a NOTIFY payload; unknown shapes still count as a change."""
        try:
            data = json.loads(payload) if payload else {}
        except json.JSONDecodeError:
            return cls(type="UNKNOWN")
        if not isinstance(data, dict):
            return cls(type="UNKNOWN")
        change_type = str(data.get("type", "")).upper()
        record_id = data.get("id")
        return cls(
            type=change_type if change_type in CHANGE_TYPES else "UNKNOWN",
            record_id=str(record_id) if record_id is not None else None,
        )


class ChangeListener:
    """Listen loop: connect -> LISTEN -> resync -> wait -> dispatch."""

    def __init__(
        self,
        settings: Settings,
        on_change: Callable[[ChangeEvent], None],
    ) -> None:
        self._settings = settings
        self._on_change = on_change
        self._events = 0

    def run(self, max_events: int | None = None) -> None:
        """Listen until interrupted, reconnecting when the connection drops.

        If max_events is set, stop after dispatching that many notifications (for testing).
        """
        Log.info(f"Listening for changes on channel '{CHANGE_CHANNEL}'")
        self._events = 0
        try:
            while not self._limit_reached(max_events):
                try:
                    self._listen(max_events)
                except psycopg.OperationalError as exc:
                    delay = self._settings.realtime_reconnect_delay_seconds
                    Log.warning(f"Listen connection lost, will retry in {delay}s: {exc}")
                    time.sleep(delay)
        except KeyboardInterrupt:
            Log.info("Change listener shutting down gracefully")

    def _listen(self, max_events: int | None) -> None:
        with listen_connection(self._settings) as conn:
            conn.execute(sql.SQL("LISTEN {}").format(sql.Identifier(CHANGE_CHANNEL)))
            self._dispatch(ChangeEvent(type=RESYNC))
            while not self._limit_reached(max_events):
                received = False
                for notify in conn.notifies(timeout=self._settings.realtime_poll_timeout_seconds):
                    received = True
                    self._dispatch(ChangeEvent.from_payload(notify.payload))
                    self._events += 1
                    if self._limit_reached(max_events):
                        break
                if not received:
                    Log.debug("No changes received, still listening")

    def _limit_reached(self, max_events: int | None) -> bool:
        return max_events is not None and self._events >= max_events

    def _dispatch(self, event: ChangeEvent) -> None:
        """Hand the event over. Handler errors are logged, the loop keeps going."""
        Log.debug(f"Change event {event.type} for record {event.record_id}")
        try:
            self._on_change(event)
        except Exception:
            Log.exception("Change handler failed, will retry on next event")
