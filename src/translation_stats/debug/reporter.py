"""Debug information about the environment, settings and cached data."""

import importlib.util
import platform
from typing import Any, Optional

from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.pretty import Pretty
from rich.text import Text

from ..config import SyncConfig
from .stores import TRANSIENT_PREFIX, SettingsStore, TransientStore

# Notice type -> border colour
NOTICE_STYLES = {
    "error": "red",
    "warning": "yellow",
    "success": "green",
    "info": "blue",
}

# Modules the update pipeline cannot run without
REQUIRED_MODULES = ("aiohttp", "aiofiles", "polib", "tenacity", "yaml", "pydantic")


def _heading(title: str) -> Text:
    return Text(title, style="bold underline")


def _code(value: Any) -> Text:
    return Text(str(value), style="bold cyan")


def _labelled(label: str, value: Any) -> Text:
    return Text.assemble(f"{label}: ", _code(value))


class DebugReporter:
    """Builds the debug panel shown by ``tstats debug``."""

    def __init__(
        self,
        settings: SettingsStore,
        transients: TransientStore,
        config: SyncConfig,
    ):
        self.settings = settings
        self.transients = transients
        self.config = config

    def check_modules(self) -> dict[str, bool]:
        """Whether each required module can be imported."""
        return {
            name: importlib.util.find_spec(name) is not None
            for name in REQUIRED_MODULES
        }

    def server_section(self) -> Group:
        lines: list[RenderableType] = [
            _heading("Server"),
            _labelled("Python Version", platform.python_version()),
            Text("Module Check:"),
        ]
        checks = self.check_modules()
        if not checks:
            lines.append(Text("No modules to test."))
        for name, available in checks.items():
            mark = Text("✔ ", style="green") if available else Text("✘ ", style="red")
            lines.append(Text.assemble(mark, name))
        return Group(*lines)

    def settings_section(self) -> Group:
        lines: list[RenderableType] = [
            _heading("Settings"),
            _labelled("Settings Page", self.config.settings_page),
            _labelled("Settings Option", self.config.option_name),
            Text("Settings List:"),
        ]
        options = self.settings.get_option(self.config.option_name)
        if options:
            lines.append(Pretty(options))
        else:
            lines.append(_code("No settings found."))
        return Group(*lines)

    def transients_section(self) -> Group:
        prefix = self.config.transients_prefix
        lines: list[RenderableType] = [
            _heading("Transients"),
            _labelled("Transients Prefix", prefix),
            Text("Transients List:"),
        ]
        names = self.transients.get_transients(prefix)
        if names:
            for name in names:
                lines.append(_code(name[len(TRANSIENT_PREFIX):]))
        else:
            lines.append(_code("No transients found."))
        return Group(*lines)

    def _enabled(self, debug: bool) -> bool:
        return self.config.debug or debug

    def render(
        self,
        notice_type: str = "info",
        inline: bool = False,
        debug: bool = False,
    ) -> Optional[Panel]:
        """Build the full debug panel.

        Returns None unless debugging is enabled in the config or by ``debug``.
        """
        if not self._enabled(debug):
            return None
        body = Group(
            self.server_section(),
            Text(),
            self.settings_section(),
            Text(),
            self.transients_section(),
        )
        return Panel(
            body,
            title="Debug",
            border_style=NOTICE_STYLES.get(notice_type, "blue"),
            expand=not inline,
        )

    def setting_field(
        self,
        setting_id: str,
        value: Any,
        default: Any,
        notice_type: str = "info",
        debug: bool = False,
    ) -> Optional[Panel]:
        """Small inline panel describing one setting."""
        if not self._enabled(debug):
            return None
        body = Group(
            _labelled("ID", setting_id),
            _labelled("Value", value),
            _labelled("Default", default),
        )
        return Panel(body, border_style=NOTICE_STYLES.get(notice_type, "blue"), expand=False)

    def show(self, console: Console, **kwargs) -> bool:
        """Print the debug panel; returns False when debugging is disabled."""
        panel = self.render(**kwargs)
        if panel is None:
            return False
        console.print(panel)
        return True
