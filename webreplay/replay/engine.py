import time
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from pydantic import BaseModel

from webreplay.core.config import ReplaySettings
from webreplay.core.errors import DriverError
from webreplay.core.logging import log
from webreplay.core.state import ActionStatus
from webreplay.recording.actions import (
    Action,
    ActionType,
    ClickData,
    NavigationData,
    ScreenshotData,
    ScrollData,
    SelectData,
    TextSelectionData,
    TypeData,
    WaitData
)
from webreplay.replay.driver import BrowserDriver

Executor = Callable[[Any], Awaitable[None]]


class ActionResult(BaseModel):
    index: int
    type: str
    status: ActionStatus
    error: Optional[str] = None


class ReplayReport(BaseModel):
    results: List[ActionResult] = []

    @property
    def failures(self) -> int:
        return sum(1 for r in self.results if r.status is ActionStatus.FAILED)

    @property
    def executed(self) -> int:
        return sum(1 for r in self.results if r.status is not ActionStatus.SKIPPED)

    @property
    def success(self) -> bool:
        return self.failures == 0


class ReplayEngine:
    """
    Replays a recorded action log against a fresh page, one action at a time.

    A failing action gets at most one fallback attempt and is then reported;
    it never aborts the rest of the replay. Between actions the engine sleeps
    for the recorded gap, capped at `max_action_gap_ms`.
    """

    def __init__(
        self,
        driver: BrowserDriver,
        settings: Optional[ReplaySettings] = None,
        clock: Callable[[], float] = time.time
    ):
        self.driver = driver
        self.settings = settings or ReplaySettings()
        self._clock = clock
        self._executors: Dict[str, Executor] = {
            ActionType.NAVIGATION.value: self._navigate,
            ActionType.CLICK.value: self._click,
            ActionType.TYPE.value: self._type,
            ActionType.SELECT.value: self._select,
            ActionType.SCROLL.value: self._scroll,
            ActionType.WAIT.value: self._wait,
            ActionType.SCREENSHOT.value: self._screenshot,
            ActionType.TEXT_SELECTION.value: self._select_text,
        }
        self._fallbacks: Dict[str, Executor] = {
            ActionType.CLICK.value: self._click_at_coordinates,
        }

    async def replay(self, actions: Sequence[Action]) -> ReplayReport:
        report = ReplayReport()
        if not actions:
            log("No actions to replay")
            return report

        log(f"Replaying {len(actions)} actions...")
        for index, action in enumerate(actions):
            report.results.append(await self.execute(index, action))

            if index + 1 < len(actions):
                delay = self.pacing_delay(action, actions[index + 1])
                if delay > 0:
                    await self.driver.sleep(delay)

        log(
            f"Replay completed: {report.executed} executed, {report.failures} failed",
            executed=report.executed,
            failures=report.failures
        )
        return report

    def pacing_delay(self, current: Action, following: Action) -> int:
        gap = following.timestamp - current.timestamp
        return max(0, min(gap, self.settings.max_action_gap_ms))

    async def execute(self, index: int, action: Action) -> ActionResult:
        """Run one action with its fallback. Driver failures are reported, not raised."""
        executor = self._executors.get(action.type)
        if executor is None:
            log(f"Skipping unknown action type: {action.type}", level="warning", action_index=index)
            return ActionResult(index=index, type=action.type, status=ActionStatus.SKIPPED)

        log(f"Replaying action: {action.type}", level="debug", action_index=index, action_type=action.type)
        try:
            await executor(action.data)
            return ActionResult(index=index, type=action.type, status=ActionStatus.OK)
        except DriverError as e:
            error = e

        fallback = self._fallbacks.get(action.type)
        if fallback is None:
            log(f"Error replaying action {action.type}: {error}", level="error", action_index=index)
            return ActionResult(index=index, type=action.type, status=ActionStatus.FAILED, error=str(error))

        log(f"{action.type} failed ({error}), trying fallback", level="warning", action_index=index)
        try:
            await fallback(action.data)
        except DriverError as fallback_error:
            message = f"{error}; fallback failed: {fallback_error}"
            log(f"Error replaying action {action.type}: {message}", level="error", action_index=index)
            return ActionResult(index=index, type=action.type, status=ActionStatus.FAILED, error=message)
        return ActionResult(index=index, type=action.type, status=ActionStatus.FALLBACK, error=str(error))

    # Executors

    async def _navigate(self, data: NavigationData) -> None:
        await self.driver.goto(data.url)

    async def _click(self, data: ClickData) -> None:
        if not data.selector:
            raise DriverError("click has no recorded selector")
        await self.driver.wait_for_visible(data.selector, self.settings.selector_timeout_ms)
        await self.driver.click(data.selector)

    async def _click_at_coordinates(self, data: ClickData) -> None:
        if data.x is None or data.y is None:
            raise DriverError("click has no recorded coordinates")
        await self.driver.click_at(data.x, data.y)

    async def _type(self, data: TypeData) -> None:
        await self.driver.wait_for_visible(data.selector, self.settings.selector_timeout_ms)
        await self.driver.type_text(data.selector, data.text)

    async def _select(self, data: SelectData) -> None:
        await self.driver.wait_for_visible(data.selector, self.settings.selector_timeout_ms)
        await self.driver.select_option(data.selector, data.value)

    async def _scroll(self, data: ScrollData) -> None:
        await self.driver.scroll_to(data.x, data.y)

    async def _wait(self, data: WaitData) -> None:
        await self.driver.sleep(data.duration)

    async def _screenshot(self, data: ScreenshotData) -> None:
        path = self.settings.screenshot_dir / f"replay-{round(self._clock() * 1000)}.png"
        await self.driver.screenshot(path)
        log(f"Screenshot saved to {path}")

    async def _select_text(self, data: TextSelectionData) -> None:
        await self.driver.wait_for_visible(data.selector, self.settings.selector_timeout_ms)
        if await self.driver.select_text(data.selector, data.selected_text):
            await self.driver.sleep(self.settings.selection_hold_ms)
        else:
            log(f"Text not found under {data.selector}, leaving selection unchanged", level="debug")
