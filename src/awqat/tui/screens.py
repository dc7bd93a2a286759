from __future__ import annotations

from pathlib import Path

from textual.app import ComposeResult  # type: ignore[import]
from textual.binding import Binding  # type: ignore[import]
from textual.containers import Vertical  # type: ignore[import]
from textual.screen import ModalScreen  # type: ignore[import]
from textual.widgets import Static  # type: ignore[import]


class PermissionScreen(ModalScreen[bool]):
    """Ask once whether prayer notifications may be shown."""

    BINDINGS = [
        Binding("y", "allow", "Allow"),
        Binding("enter", "allow", "Allow", show=False),
        Binding("n", "block", "Block"),
        Binding("escape", "block", "Block", show=False),
    ]

    def __init__(self, app_name: str) -> None:
        super().__init__()
        self.app_name = app_name

    def compose(self) -> ComposeResult:
        yield Vertical(
            Static("Enable notifications", classes="dialog-title"),
            Static(
                f"{self.app_name} wants to show a notification when the next prayer time arrives.",
                classes="dialog-item",
                markup=False,
            ),
            Static("Y / Enter = Allow • N / Esc = Block", classes="dialog-help"),
            id="permission-dialog",
        )

    def action_allow(self) -> None:
        self.dismiss(True)

    def action_block(self) -> None:
        self.dismiss(False)


class ConfigWarningScreen(ModalScreen[None]):
    """List config problems that were replaced by defaults."""

    BINDINGS = [
        Binding("enter", "continue", "Continue"),
        Binding("escape", "continue", "Continue", show=False),
    ]

    def __init__(self, config_path: Path, problems: list[str]) -> None:
        super().__init__()
        self.config_path = config_path
        self.problems = list(problems)

    def compose(self) -> ComposeResult:
        yield Vertical(
            Static("Some settings were ignored", classes="dialog-title"),
            Static(f"Defaults are used instead. Check {self.config_path}.", classes="dialog-item", markup=False),
            *[Static(f"- {problem}", classes="dialog-item", markup=False) for problem in self.problems],
            Static("Enter / Esc = Continue", classes="dialog-help"),
            id="config-dialog",
        )

    def action_continue(self) -> None:
        self.dismiss(None)
