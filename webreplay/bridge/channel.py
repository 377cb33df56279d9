from pathlib import Path
from typing import Any, Optional, Union

from playwright.async_api import BrowserContext, Page

from webreplay.core.constants import BRIDGE_BINDING_NAME, SCROLL_DEBOUNCE_MS
from webreplay.core.errors import ActionValidationError
from webreplay.core.logging import log
from webreplay.recording.actions import Action, ActionType
from webreplay.recording.session import RecordingSession

# Kinds the page is allowed to publish. Screenshots and waits are operator actions.
BRIDGE_KINDS = frozenset({
    ActionType.CLICK.value,
    ActionType.TYPE.value,
    ActionType.SELECT.value,
    ActionType.NAVIGATION.value,
    ActionType.SCROLL.value,
    ActionType.TEXT_SELECTION.value,
})


class EventBridge:
    """
    Host side of the in-page event bridge.

    The page script publishes ``{"kind": ..., **payload}`` messages through one
    exposed binding; every message is forwarded to the session, which decides
    whether it is recording.
    """

    SCRIPT_PATH = Path(__file__).parent / "event_bridge.js"

    def __init__(self, session: RecordingSession, binding_name: str = BRIDGE_BINDING_NAME):
        self.session = session
        self.binding_name = binding_name

    def load_script(self) -> str:
        script = self.SCRIPT_PATH.read_text(encoding="utf-8")
        return (
            script
            .replace("__BINDING_NAME__", self.binding_name)
            .replace("__SCROLL_DEBOUNCE_MS__", str(SCROLL_DEBOUNCE_MS))
        )

    async def install(self, target: Union[Page, BrowserContext]) -> None:
        """Expose the binding and register the script for every future document."""
        await target.expose_function(self.binding_name, self.handle_message)
        await target.add_init_script(script=self.load_script())
        log("Event bridge installed", level="debug", binding=self.binding_name)

    def handle_message(self, message: Any) -> Optional[Action]:
        if not isinstance(message, dict):
            log(f"Dropping bridge message of type {type(message).__name__}", level="warning")
            return None

        kind = message.get("kind")
        if not isinstance(kind, str) or kind not in BRIDGE_KINDS:
            log(f"Dropping bridge message with unknown kind: {kind!r}", level="warning")
            return None

        payload = {k: v for k, v in message.items() if k != "kind"}
        try:
            return self.session.record_action(kind, payload)
        except ActionValidationError as e:
            log(f"Dropping malformed {kind} message: {e}", level="warning")
            return None
