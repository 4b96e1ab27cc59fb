"""Real-time CLI dashboard for relay monitoring."""

from datetime import datetime
from threading import Lock

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from ui.log_utils import format_size, redact_url, write_cli_log

console = Console()


class RelayInfo:
    """Info about a single relayed request."""

    def __init__(self, target: str, status: int, kind: str, size: int, timestamp: datetime):
        self.target = target[:80] + "..." if len(target) > 80 else target
        self.status = status
        self.kind = kind
        self.size = size
        self.timestamp = timestamp


class Dashboard:
    """Real-time dashboard showing recent relayed requests and errors."""

    def __init__(self, config: Config):
        self.config = config
        self._lock = Lock()
        self._recent: list[RelayInfo] = []
        self._max_recent = 10
        self._request_count = {"html": 0, "passthrough": 0, "error": 0}
        self._errors: list[str] = []
        self._live: Live | None = None

    def start(self) -> "Dashboard":
        """Start the live dashboard."""
        self._live = Live(
            self._build_layout(),
            console=console,
            refresh_per_second=4,
            screen=False,
        )
        self._live.start()
        return self

    def stop(self) -> None:
        """Stop the live dashboard."""
        if self._live:
            self._live.stop()

    def log_relay(self, target: str, status: int, *, kind: str, size: int) -> None:
        """Log a relayed response (rewritten document or passthrough)."""
        with self._lock:
            self._request_count[kind] = self._request_count.get(kind, 0) + 1
            safe_target = redact_url(target)
            self._recent.insert(
                0,
                RelayInfo(safe_target, status, kind, size, timestamp=datetime.now()),
            )
            self._recent = self._recent[: self._max_recent]
            write_cli_log(kind.upper(), safe_target, status=status, size=size)
            self._refresh()

    def log_error(self, target: str, status: int, message: str) -> None:
        """Log an error."""
        with self._lock:
            self._request_count["error"] += 1
            safe_target = redact_url(target)
            truncated = message[:50] + "..." if len(message) > 50 else message
            self._errors.insert(0, f"{status} {safe_target}: {truncated}")
            self._errors = self._errors[:3]
            write_cli_log("ERROR", message[:200], target=safe_target, status=status)
            self._refresh()

    def _refresh(self) -> None:
        """Refresh the display."""
        if self._live:
            self._live.update(self._build_layout())

    def _build_layout(self) -> Layout:
        """Build the dashboard layout."""
        layout = Layout()

        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=5),
        )

        layout["header"].update(self._build_header())
        layout["body"].update(self._build_requests_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        stats = Text()
        stats.append("Ultraviolet Relay", style="bold magenta")
        stats.append("  |  ")
        stats.append(f"HTML: {self._request_count['html']}", style="blue")
        stats.append("  |  ")
        stats.append(f"Passthrough: {self._request_count['passthrough']}", style="cyan")
        stats.append("  |  ")
        stats.append(f"Errors: {self._request_count['error']}", style="red")
        stats.append("  |  ")
        stats.append(f"Port: {self.config.proxy.port}", style="dim")

        return Panel(stats, style="magenta")

    def _build_requests_panel(self) -> Panel:
        """Build the recent requests panel."""
        if self._recent:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Status", width=6)
            table.add_column("Kind", width=11)
            table.add_column("Size", width=9)
            table.add_column("Target", ratio=1)

            for info in self._recent:
                status_style = "green" if info.status < 400 else "yellow"
                table.add_row(
                    info.timestamp.strftime("%H:%M:%S"),
                    Text(str(info.status), style=status_style),
                    info.kind,
                    format_size(info.size),
                    info.target,
                )
            content = table
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(content, title="[blue]Recent requests[/blue]", border_style="blue")

    def _build_footer(self) -> Panel:
        """Build footer with errors and help."""
        if self._errors:
            error_text = Text()
            for err in self._errors:
                error_text.append("! ", style="red bold")
                error_text.append(err + "\n", style="red")
            content = error_text
        else:
            relay = self.config.relay
            content = Text(
                f"Open http://{self.config.proxy.host}:{self.config.proxy.port}"
                f"{relay.base_path}?{relay.target_param}=<base64(url)>",
                style="dim",
            )

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")
