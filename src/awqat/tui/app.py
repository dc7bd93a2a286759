from __future__ import annotations

import logging
from typing import Callable, Iterable

from textual.app import App, ComposeResult  # type: ignore[import]
from textual.binding import Binding  # type: ignore[import]
from textual.containers import Horizontal, Vertical  # type: ignore[import]
from textual.timer import Timer  # type: ignore[import]
from textual.widgets import Button, DataTable, Footer, Header, Input, Static  # type: ignore[import]

from ..config import AwqatConfig, ConfigManager
from ..controller import AppState, PrayerTimesController
from ..models import PermissionState, PrayerEvent, PrayerTimes
from ..notifications import NotificationCenter
from ..timeutils import format_time
from .screens import ConfigWarningScreen, PermissionScreen

logger = logging.getLogger(__name__)

PERMISSION_STATUS = {
    PermissionState.GRANTED: "Notifications are enabled.",
    PermissionState.DENIED: "Notifications are blocked. Please enable them in your settings.",
    PermissionState.DEFAULT: "",
}


def prayer_rows(times: PrayerTimes | None) -> list[tuple[str, str]]:
    if times is None:
        return []
    return [(name, format_time(value)) for name, value in times.visible()]


def next_event_text(event: PrayerEvent | None) -> str:
    if event is None:
        return ""
    when = format_time(event.at.strftime("%H:%M"))
    day = " tomorrow" if event.tomorrow else ""
    return f"Next notification: {event.name} at {when}{day}"


class AwqatApp(App):
    CSS = """
    Screen {
        background: $surface;
        align: center middle;
    }

    #main-panel {
        width: 72;
        height: auto;
        max-height: 100%;
        border: round $accent;
        padding: 1 2;
        background: $boost;
    }

    .panel-title {
        text-style: bold;
        content-align: center middle;
        width: 100%;
    }

    #current-date, #location-label, #notify-status, #next-event, #data-credit {
        content-align: center middle;
        width: 100%;
    }

    #location-label {
        text-style: bold;
        color: $accent;
        margin-bottom: 1;
    }

    .row {
        height: auto;
    }

    .row Input, .row Button {
        width: 1fr;
    }

    #loading-line {
        color: $text-muted;
    }

    #error-line {
        color: $error;
    }

    #prayer-table {
        height: auto;
        margin-top: 1;
    }

    #data-credit {
        color: $text-muted;
        margin-top: 1;
    }

    #permission-dialog, #config-dialog {
        width: 60;
        height: auto;
        border: round $accent;
        background: $panel;
        padding: 1 2;
    }

    .dialog-title {
        text-style: bold;
        margin-bottom: 1;
    }

    .dialog-help {
        color: $text-muted;
        margin-top: 1;
    }
    """
    TITLE = "Prayer Times"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "reload", "Reload"),
        Binding("l", "locate", "Use My Location"),
        Binding("n", "enable_notifications", "Enable Notifications"),
    ]

    def __init__(self, config_manager: ConfigManager | None = None, config: AwqatConfig | None = None) -> None:
        super().__init__()
        self.config_manager = config_manager or ConfigManager()
        self.config = config or self.config_manager.load()
        self.notifier = NotificationCenter(self.config.notifications, mirror=self._show_toast)
        self.controller = PrayerTimesController(
            self.config,
            timer_factory=self._start_timer,
            notifier=self.notifier,
        )
        self.controller.subscribe(self._render_state)
        self.prayer_table: DataTable | None = None
        self._ready = False

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        self.prayer_table = DataTable(zebra_stripes=True, id="prayer-table")
        yield Vertical(
            Static("Prayer Times", classes="panel-title"),
            Static("", id="current-date"),
            Static(self.controller.state.location_label, id="location-label", markup=False),
            Horizontal(
                Input(placeholder="City (e.g., London)", id="city-input"),
                Input(placeholder="Country (e.g., UK)", id="country-input"),
                classes="row",
            ),
            Horizontal(
                Button("Search Location", id="search-button", variant="success"),
                Button("Use My Location", id="locate-button", variant="primary"),
                classes="row",
            ),
            Button("Enable Notifications", id="notify-button", variant="warning"),
            Static("", id="notify-status"),
            Static("", id="loading-line"),
            Static("", id="error-line", markup=False),
            self.prayer_table,
            Static("", id="next-event"),
            Static("Data provided by Aladhan API.", id="data-credit"),
            id="main-panel",
        )
        yield Footer()

    async def on_mount(self) -> None:
        assert self.prayer_table is not None
        self.prayer_table.add_columns("Prayer", "Time")
        self.prayer_table.cursor_type = "row"
        self._ready = True
        logger.debug("Configuration loaded from %s", self.config_manager.config_path)
        self._render_state(self.controller.state)
        errors = self.config_manager.errors()
        if errors:
            self.push_screen(ConfigWarningScreen(self.config_manager.config_path, errors))
        self.run_worker(self.controller.load_default(), group="fetch")

    def on_unmount(self) -> None:
        self.controller.close()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if button_id == "search-button":
            self.action_search()
        elif button_id == "locate-button":
            self.action_locate()
        elif button_id == "notify-button":
            self.action_enable_notifications()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.action_search()

    def action_search(self) -> None:
        city = self.query_one("#city-input", Input).value
        country = self.query_one("#country-input", Input).value
        self.run_worker(self.controller.search(city, country), group="fetch")

    def action_locate(self) -> None:
        self.run_worker(self.controller.use_geolocation(), group="fetch")

    def action_reload(self) -> None:
        self.run_worker(self.controller.reload(), group="fetch")

    def action_enable_notifications(self) -> None:
        self.run_worker(self.controller.enable_notifications(self._ask_permission), group="permission")

    async def _ask_permission(self) -> bool:
        allowed = await self.push_screen_wait(PermissionScreen(self.config.notifications.app_name))
        return bool(allowed)

    def _start_timer(self, delay: float, callback: Callable[[], None]) -> Timer:
        return self.set_timer(delay, callback, name="prayer-notification")

    def _show_toast(self, title: str, body: str) -> None:
        self.notify(body, title=title, timeout=self.config.notifications.timeout)
        self._render_state(self.controller.state)

    def _render_state(self, state: AppState) -> None:
        if not self._ready:
            return
        self.query_one("#current-date", Static).update(state.current_date)
        self.query_one("#location-label", Static).update(state.location_label)
        self.query_one("#loading-line", Static).update("Loading prayer times..." if state.loading else "")
        self.query_one("#error-line", Static).update(state.error or "")
        self.query_one("#notify-button", Button).display = state.permission is PermissionState.DEFAULT
        self.query_one("#notify-status", Static).update(PERMISSION_STATUS[state.permission])
        self.query_one("#next-event", Static).update(next_event_text(self.controller.pending_event))
        self._fill_table(prayer_rows(state.prayer_times))

    def _fill_table(self, rows: Iterable[tuple[str, str]]) -> None:
        table = self.prayer_table
        if table is None:
            return
        table.clear()
        for name, value in rows:
            table.add_row(name, value, key=name)
