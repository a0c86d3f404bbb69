"""Application runner for diskrank."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from diskrank.core.config import MainConfig
from diskrank.core.data.filesystem import DirectoryScanner, SizeProbe
from diskrank.core.navigator import Navigator, normalize_path
from diskrank.ui.report import print_report

logger = logging.getLogger(__name__)


class ApplicationRunner:
    """Main application runner that coordinates all components."""

    def __init__(self, root: Path, config: MainConfig, *, tui: bool = False) -> None:
        """Initialize the application runner.

        Args:
            root: Directory to analyse
            config: Validated configuration with CLI overrides applied
            tui: Start the interactive browser instead of printing a report
        """
        self.root: Path = root
        self.config: MainConfig = config
        self.tui: bool = tui

    def build_scanner(self) -> DirectoryScanner:
        """Create the scanner described by the scanner configuration."""
        scanner_config = self.config.scanner
        return DirectoryScanner(
            SizeProbe(scanner_config.size_mode),
            max_workers=scanner_config.max_workers,
            batch_size=scanner_config.batch_size,
        )

    def run(self) -> None:
        """Run the selected mode.

        Raises:
            TerminalError: If the browser cannot take over the terminal
        """
        logger.info(
            "diskrank starting",
            extra={"root": str(self.root), "mode": "browser" if self.tui else "report"},
        )
        if self.tui:
            self.run_browser()
        else:
            self.run_report()

    def run_report(self) -> None:
        root = normalize_path(self.root)
        inventory = self.build_scanner().scan(root)
        display = self.config.display
        print_report(
            root,
            inventory,
            bar_width=display.bar_width,
            color=display.color,
            binary_units=display.binary_units,
        )

    def run_browser(self) -> None:
        # Imported lazily: termios is unavailable on some platforms
        from diskrank.ui.browser import Browser
        from diskrank.ui.terminal import TerminalController

        terminal = TerminalController(sys.stdin.fileno(), sys.stdout.fileno())
        navigator = Navigator(self.root, self.build_scanner())
        display = self.config.display
        Browser(
            navigator,
            terminal,
            bar_width=display.bar_width,
            color=display.color,
            binary_units=display.binary_units,
        ).run()
