import asyncio
from pathlib import Path
from typing import List, Optional

import typer
from playwright.async_api import Error as PlaywrightError

from webreplay.browser.manager import BrowserManager
from webreplay.core.config import ConfigManager, ReplaySettings
from webreplay.core.errors import RecordingFormatError
from webreplay.core.logging import log, Logger
from webreplay.recording.actions import Action
from webreplay.recording.storage import load_recording
from webreplay.replay.driver import PlaywrightDriver
from webreplay.replay.engine import ReplayEngine, ReplayReport
from webreplay.utils.ux import UX


def _load_or_exit(path: Path) -> List[Action]:
    try:
        return load_recording(path)
    except RecordingFormatError as e:
        UX.print_error(f"Cannot load {path}: {e}")
        raise typer.Exit(code=1)


async def run_replay(actions: List[Action], settings: ReplaySettings, headless: bool) -> ReplayReport:
    """Replay on a newly created page. The caller owns nothing but the action list."""
    browser = BrowserManager(headless=headless)
    try:
        with UX.spinner("Launching browser..."):
            await browser.start()
        page = await browser.new_page()
        driver = PlaywrightDriver(
            page,
            navigation_timeout_ms=settings.navigation_timeout_ms,
            action_timeout_ms=settings.selector_timeout_ms
        )
        return await ReplayEngine(driver, settings).replay(actions)
    finally:
        await browser.close()


def replay(
    path: Path = typer.Argument(..., help="Recording file to replay"),
    headless: Optional[bool] = typer.Option(None, "--headless/--headed", help="Run browser in headless mode"),
    screenshot_dir: Optional[Path] = typer.Option(None, "--screenshot-dir", help="Where replay screenshots go"),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir", help="Also write master.log and events.json here"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging")
):
    """
    Replay a saved recording in a fresh browser page.
    """
    Logger.setup_logging(log_dir=log_dir, verbose=verbose)
    actions = _load_or_exit(path)

    if not actions:
        UX.print_success("Recording is empty, nothing to replay")
        return

    config = ConfigManager.load_config()
    try:
        settings = ConfigManager.replay_settings(config)
    except ValueError as e:
        UX.print_error(str(e))
        raise typer.Exit(code=1)
    if screenshot_dir is not None:
        settings = settings.model_copy(update={"screenshot_dir": screenshot_dir})
    if headless is None:
        headless = bool(config["headless"])

    try:
        report = asyncio.run(run_replay(actions, settings, headless))
    except KeyboardInterrupt:
        log("Replay interrupted by user.", level="warning")
        raise typer.Exit(code=130)
    except PlaywrightError as e:
        log(f"Browser error: {e.message}", level="error")
        raise typer.Exit(code=1)

    UX.render_report(report)
    if not report.success:
        raise typer.Exit(code=1)


def show(path: Path = typer.Argument(..., help="Recording file to inspect")):
    """Print the actions of a saved recording."""
    actions = _load_or_exit(path)
    if not actions:
        UX.print_warning("Recording is empty")
        return
    UX.render_actions(actions)
