import pytest
from pathlib import Path
from typing import List, Set, Tuple, Any

from webreplay.browser.manager import BrowserManager
from webreplay.core.logging import Logger
from webreplay.core.config import ConfigManager
from webreplay.core.errors import DriverError, SelectorTimeoutError
from webreplay.replay.driver import BrowserDriver


class FakeDriver(BrowserDriver):
    """Records every driver call; failures are switched on per test."""

    def __init__(self):
        self.calls: List[Tuple[Any, ...]] = []
        self.hidden_selectors: Set[str] = set()
        self.broken_urls: Set[str] = set()
        self.click_at_fails = False
        self.text_present = True

    def named(self, name: str) -> List[Tuple[Any, ...]]:
        return [c for c in self.calls if c[0] == name]

    async def goto(self, url):
        self.calls.append(("goto", url))
        if url in self.broken_urls:
            raise DriverError(f"net::ERR_NAME_NOT_RESOLVED at {url}")

    async def wait_for_visible(self, selector, timeout_ms):
        self.calls.append(("wait_for_visible", selector, timeout_ms))
        if selector in self.hidden_selectors:
            raise SelectorTimeoutError(selector, timeout_ms)

    async def click(self, selector):
        self.calls.append(("click", selector))

    async def click_at(self, x, y):
        self.calls.append(("click_at", x, y))
        if self.click_at_fails:
            raise DriverError("mouse click failed")

    async def type_text(self, selector, text):
        self.calls.append(("type_text", selector, text))

    async def select_option(self, selector, value):
        self.calls.append(("select_option", selector, value))

    async def scroll_to(self, x, y):
        self.calls.append(("scroll_to", x, y))

    async def screenshot(self, path):
        self.calls.append(("screenshot", path))

    async def select_text(self, selector, text):
        self.calls.append(("select_text", selector, text))
        return self.text_present

    async def sleep(self, ms):
        self.calls.append(("sleep", ms))


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def advance(self, ms: float):
        self.now += ms / 1000

    def __call__(self) -> float:
        return self.now


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    # CLI commands bind handlers to the runner's temporary stdout
    logger = Logger.get_logger()
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


@pytest.fixture
def fake_driver():
    return FakeDriver()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    config_file = tmp_path / ".webreplay" / "config.json"
    monkeypatch.setattr(ConfigManager, "CONFIG_FILE", config_file)
    return config_file


@pytest.fixture
async def browser_page():
    manager = BrowserManager(headless=True)
    try:
        await manager.start()
    except Exception as e:
        await manager.close()
        pytest.skip(f"Chromium unavailable: {e}")
    page = await manager.new_page()
    yield page
    await manager.close()
