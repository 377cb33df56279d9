import asyncio
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path

from playwright.async_api import Page, Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError

from webreplay.core.constants import (
    DEFAULT_NAVIGATION_TIMEOUT_MS,
    DEFAULT_SELECTOR_TIMEOUT_MS,
    NAVIGATION_WAIT_UNTIL
)
from webreplay.core.errors import DriverError, SelectorTimeoutError

# Depth-first search for the first text node under `selector` containing `text`,
# then make exactly that substring the active selection.
SELECT_TEXT_JS = """
({ selector, text }) => {
    const root = document.querySelector(selector);
    if (!root) {
        return false;
    }
    const findTextNode = (node) => {
        if (node.nodeType === Node.TEXT_NODE && node.textContent.includes(text)) {
            return node;
        }
        for (const child of node.childNodes) {
            const hit = findTextNode(child);
            if (hit) {
                return hit;
            }
        }
        return null;
    };
    const textNode = findTextNode(root);
    if (!textNode) {
        return false;
    }
    const start = textNode.textContent.indexOf(text);
    const range = document.createRange();
    range.setStart(textNode, start);
    range.setEnd(textNode, start + text.length);
    const selection = window.getSelection();
    selection.removeAllRanges();
    selection.addRange(range);
    return true;
}
"""


class BrowserDriver(ABC):
    """Browser capabilities the replay engine depends on."""

    @abstractmethod
    async def goto(self, url: str) -> None:
        """Navigate and wait until the network is quiet."""
        pass

    @abstractmethod
    async def wait_for_visible(self, selector: str, timeout_ms: int) -> None:
        pass

    @abstractmethod
    async def click(self, selector: str) -> None:
        pass

    @abstractmethod
    async def click_at(self, x: float, y: float) -> None:
        pass

    @abstractmethod
    async def type_text(self, selector: str, text: str) -> None:
        """Replace the element's value by typing `text` key by key."""
        pass

    @abstractmethod
    async def select_option(self, selector: str, value: str) -> None:
        pass

    @abstractmethod
    async def scroll_to(self, x: float, y: float) -> None:
        pass

    @abstractmethod
    async def screenshot(self, path: Path) -> None:
        pass

    @abstractmethod
    async def select_text(self, selector: str, text: str) -> bool:
        """Select the first occurrence of `text` under `selector`. Returns False if absent."""
        pass

    @abstractmethod
    async def sleep(self, ms: int) -> None:
        pass


class PlaywrightDriver(BrowserDriver):
    """BrowserDriver over a Playwright page. Playwright and filesystem errors surface as DriverError."""

    def __init__(
        self,
        page: Page,
        navigation_timeout_ms: int = DEFAULT_NAVIGATION_TIMEOUT_MS,
        action_timeout_ms: int = DEFAULT_SELECTOR_TIMEOUT_MS
    ):
        self.page = page
        self.navigation_timeout_ms = navigation_timeout_ms
        self.action_timeout_ms = action_timeout_ms

    @contextmanager
    def _errors(self, operation: str):
        try:
            yield
        except PlaywrightError as e:
            raise DriverError(f"{operation} failed: {e.message}") from e
        except OSError as e:
            raise DriverError(f"{operation} failed: {e}") from e

    async def goto(self, url: str) -> None:
        with self._errors(f"navigation to {url}"):
            await self.page.goto(url, wait_until=NAVIGATION_WAIT_UNTIL, timeout=self.navigation_timeout_ms)

    async def wait_for_visible(self, selector: str, timeout_ms: int) -> None:
        try:
            await self.page.wait_for_selector(selector, state="visible", timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise SelectorTimeoutError(selector, timeout_ms) from e
        except PlaywrightError as e:
            raise DriverError(f"waiting for '{selector}' failed: {e.message}") from e

    async def click(self, selector: str) -> None:
        with self._errors(f"click on '{selector}'"):
            await self.page.click(selector, timeout=self.action_timeout_ms)

    async def click_at(self, x: float, y: float) -> None:
        with self._errors(f"click at ({x}, {y})"):
            await self.page.mouse.click(x, y)

    async def type_text(self, selector: str, text: str) -> None:
        with self._errors(f"typing into '{selector}'"):
            field = self.page.locator(selector).first
            await field.fill("", timeout=self.action_timeout_ms)
            await field.press_sequentially(text, timeout=self.action_timeout_ms)

    async def select_option(self, selector: str, value: str) -> None:
        with self._errors(f"select on '{selector}'"):
            await self.page.select_option(selector, value=value, timeout=self.action_timeout_ms)

    async def scroll_to(self, x: float, y: float) -> None:
        with self._errors("scroll"):
            await self.page.evaluate("([x, y]) => window.scrollTo(x, y)", [x, y])

    async def screenshot(self, path: Path) -> None:
        with self._errors(f"screenshot to {path}"):
            path.parent.mkdir(parents=True, exist_ok=True)
            await self.page.screenshot(path=str(path), full_page=True)

    async def select_text(self, selector: str, text: str) -> bool:
        with self._errors(f"text selection in '{selector}'"):
            return bool(await self.page.evaluate(SELECT_TEXT_JS, {"selector": selector, "text": text}))

    async def sleep(self, ms: int) -> None:
        await asyncio.sleep(ms / 1000)
