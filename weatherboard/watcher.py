"""Foreground watch mode: keeps the dashboard mounted and re-renders on updates.

Usage:
    python -m weatherboard watch --city Busan
    python -m weatherboard watch --detailed
    python -m weatherboard watch --json
"""

import logging
import signal
import threading

from weatherboard.controller import DashboardController
from weatherboard.models.common import StreamName, StreamStatus
from weatherboard.render.formatters import (
    format_current_text,
    format_detailed_text,
    format_forecast_text,
    format_state_json,
)

logger = logging.getLogger(__name__)


class DashboardWatcher:
    """Mounts a controller, prints each panel as it updates, stops on a signal."""

    def __init__(self, controller: DashboardController, out=print, as_json: bool = False):
        self.controller = controller
        self.out = out
        self.as_json = as_json
        self._stopped = threading.Event()
        self._renders = 0

    @property
    def renders(self) -> int:
        return self._renders

    def start(self) -> None:
        self._setup_signals()
        self.controller.add_listener(self._on_change)
        city = self.controller.state.selected_city.name
        logger.info("Watching %s", city)
        self.out(f"🔄 Watching {city} (Ctrl-C to stop)")
        try:
            self.controller.mount()
            while not self._stopped.wait(1.0):
                pass
        except KeyboardInterrupt:
            logger.info("Watcher interrupted by keyboard")
        finally:
            self.controller.close()
            self.out(f"⏹️  Stopped after {self._renders} updates")

    def stop(self) -> None:
        self._stopped.set()

    def render(self, name: str) -> str | None:
        """Render one stream as text, or None if it has nothing to show yet."""
        s = self.controller.stream(name)
        city = s.city or self.controller.state.selected_city.name
        if s.status == StreamStatus.FAILED:
            return f"[{name}] {s.error}"
        if s.status != StreamStatus.READY:
            return None
        if name == StreamName.CURRENT:
            return format_current_text(city, s.data)
        if name == StreamName.FORECAST:
            return format_forecast_text(s.data, self.controller.tz)
        return format_detailed_text(
            city, s.data, self.controller.language, self.controller.tz
        )

    def _on_change(self, what: str) -> None:
        if what not in set(StreamName):
            return
        text = self.render(what)
        if text is not None and self.as_json:
            text = format_state_json(self.controller.snapshot())
        if text is not None:
            self._renders += 1
            self.out(text)

    def _setup_signals(self) -> None:
        """Handle SIGTERM and SIGINT for graceful shutdown."""
        if threading.current_thread() is not threading.main_thread():
            return

        def _stop(signum: int, frame: object) -> None:
            sig_name = signal.Signals(signum).name
            logger.info("Received %s, shutting down gracefully...", sig_name)
            self.stop()

        signal.signal(signal.SIGTERM, _stop)
        signal.signal(signal.SIGINT, _stop)
