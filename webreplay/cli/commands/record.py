import asyncio
import time
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from playwright.async_api import Page, Error as PlaywrightError

from webreplay.browser.manager import BrowserManager
from webreplay.bridge.channel import EventBridge
from webreplay.core.config import ConfigManager, ReplaySettings
from webreplay.core.constants import NAVIGATION_WAIT_UNTIL
from webreplay.core.errors import RecordingFormatError
from webreplay.core.logging import log, Logger
from webreplay.interactive.ui import UI
from webreplay.recording.actions import ActionType
from webreplay.recording.session import RecordingSession
from webreplay.recording.storage import load_recording, save_recording
from webreplay.replay.driver import PlaywrightDriver
from webreplay.replay.engine import ReplayEngine
from webreplay.utils.ux import UX


class OperatorLoop:
    """Keyboard-driven glue around one RecordingSession and a recording page."""

    def __init__(
        self,
        browser: BrowserManager,
        page: Page,
        session: RecordingSession,
        config: Dict[str, Any],
        settings: ReplaySettings,
        output: Path
    ):
        self.browser = browser
        self.page = page
        self.session = session
        self.config = config
        self.settings = settings
        self.output = output

    async def run(self) -> None:
        handlers = {
            "toggle": self.toggle,
            "screenshot": self.screenshot,
            "wait": self.wait,
            "replay": self.replay,
            "save": self.save,
            "load": self.load,
        }
        while True:
            command = await UI.ask_command(self.session.is_recording, len(self.session.actions))
            if command == "quit":
                log("Quitting...")
                return
            try:
                await handlers[command]()
            except PlaywrightError as e:
                UX.print_error(f"{command} failed: {e.message}")
            except OSError as e:
                UX.print_error(f"{command} failed: {e}")

    async def toggle(self) -> None:
        if self.session.is_recording:
            self.session.stop()
        else:
            self.session.start()

    async def screenshot(self) -> None:
        screenshot_dir = self.settings.screenshot_dir
        screenshot_dir.mkdir(parents=True, exist_ok=True)
        path = screenshot_dir / f"screenshot-{int(time.time() * 1000)}.png"
        await self.page.screenshot(path=str(path), full_page=True)
        self.session.record_action(ActionType.SCREENSHOT, {"path": str(path)})
        UX.print_success(f"Screenshot saved to {path}")

    async def wait(self) -> None:
        duration = max(0, int(self.config["operator_wait_ms"]))
        log(f"Waiting for {duration}ms...")
        self.session.record_action(ActionType.WAIT, {"duration": duration})
        await self.page.wait_for_timeout(duration)

    async def replay(self) -> None:
        actions = self.session.actions
        if not actions:
            UX.print_warning("No actions to replay")
            return
        replay_page = await self.browser.new_page()
        driver = PlaywrightDriver(
            replay_page,
            navigation_timeout_ms=self.settings.navigation_timeout_ms,
            action_timeout_ms=self.settings.selector_timeout_ms
        )
        report = await ReplayEngine(driver, self.settings).replay(actions)
        UX.render_report(report)

    async def save(self) -> None:
        target = await UI.ask_path("Save recording to:", default=str(self.output))
        try:
            path = save_recording(target, self.session.actions)
        except OSError as e:
            UX.print_error(f"Cannot save to {target}: {e}")
            return
        UX.print_success(f"Saved {len(self.session.actions)} action(s) to {path}")

    async def load(self) -> None:
        source = await UI.ask_path("Load recording from:", default=str(self.output))
        try:
            actions = load_recording(source)
        except RecordingFormatError as e:
            UX.print_error(str(e))
            return
        self.session.load(actions)
        UX.print_success(f"Loaded {len(actions)} action(s) from {source}")


async def record_session(
    url: str,
    output: Path,
    headless: bool,
    config: Dict[str, Any],
    settings: ReplaySettings
) -> None:
    session = RecordingSession()
    bridge = EventBridge(session)

    browser = BrowserManager(headless=headless)
    try:
        with UX.spinner("Launching browser..."):
            await browser.start()
        page = await browser.new_page()
        await bridge.install(page)

        session.start()
        log(f"Navigating to {url}...")
        await page.goto(url, wait_until=NAVIGATION_WAIT_UNTIL, timeout=settings.navigation_timeout_ms)
        session.record_action(ActionType.NAVIGATION, {"url": url})

        UI.show_banner(url)
        await OperatorLoop(browser, page, session, config, settings, output).run()
    finally:
        await browser.close()


def record(
    url: str = typer.Argument(..., help="URL to open and record"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Default path for saving the recording"),
    headless: Optional[bool] = typer.Option(None, "--headless/--headed", help="Run browser in headless mode"),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir", help="Also write master.log and events.json here"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging")
):
    """
    Open a page and record clicks, typing, scrolling and selections.
    """
    Logger.setup_logging(log_dir=log_dir, verbose=verbose)

    try:
        url = ConfigManager.validate_url(url)
    except ValueError as e:
        log(str(e), level="error")
        raise typer.Exit(code=1)

    config = ConfigManager.load_config()
    try:
        settings = ConfigManager.replay_settings(config)
    except ValueError as e:
        UX.print_error(str(e))
        raise typer.Exit(code=1)
    if headless is None:
        headless = bool(config["headless"])
    if output is None:
        output = Path(config["recordings_dir"]) / f"recording-{time.strftime('%Y%m%d-%H%M%S')}.json"

    try:
        asyncio.run(record_session(url, output, headless, config, settings))
    except KeyboardInterrupt:
        log("Recording interrupted by user.", level="warning")
        raise typer.Exit(code=0)
    except PlaywrightError as e:
        log(f"Browser error: {e.message}", level="error")
        raise typer.Exit(code=1)
