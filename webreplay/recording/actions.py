"""
Action schema shared by the recorder and the replay engine.

A recording is an ordered list of actions. Each action serializes as
``{"type": <kind>, "timestamp": <ms since session start>, "data": {...}}``
where ``data`` has one fixed shape per kind.
"""
from enum import Enum
from typing import Any, Dict, Iterable, List, Literal, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from webreplay.core.errors import ActionValidationError, RecordingFormatError


class ActionType(str, Enum):
    CLICK = "click"
    TYPE = "type"
    NAVIGATION = "navigation"
    SELECT = "select"
    SCREENSHOT = "screenshot"
    SCROLL = "scroll"
    WAIT = "wait"
    TEXT_SELECTION = "text_selection"


class Payload(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class ClickData(Payload):
    selector: Optional[str] = None
    x: Optional[float] = None
    y: Optional[float] = None


class TypeData(Payload):
    selector: str
    text: str


class NavigationData(Payload):
    url: str


class SelectData(Payload):
    selector: str
    value: str


class ScreenshotData(Payload):
    path: Optional[str] = None


class ScrollData(Payload):
    x: float
    y: float


class WaitData(Payload):
    duration: int = Field(ge=0)


class TextSelectionData(Payload):
    selector: str
    selected_text: str = Field(alias="selectedText")


class BaseAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: int = Field(ge=0)


class ClickAction(BaseAction):
    type: Literal["click"] = "click"
    data: ClickData


class TypeAction(BaseAction):
    type: Literal["type"] = "type"
    data: TypeData


class NavigationAction(BaseAction):
    type: Literal["navigation"] = "navigation"
    data: NavigationData


class SelectAction(BaseAction):
    type: Literal["select"] = "select"
    data: SelectData


class ScreenshotAction(BaseAction):
    type: Literal["screenshot"] = "screenshot"
    data: ScreenshotData


class ScrollAction(BaseAction):
    type: Literal["scroll"] = "scroll"
    data: ScrollData


class WaitAction(BaseAction):
    type: Literal["wait"] = "wait"
    data: WaitData


class TextSelectionAction(BaseAction):
    type: Literal["text_selection"] = "text_selection"
    data: TextSelectionData


class UnknownAction(BaseAction):
    """A well-formed record of a kind this version does not know. Replay skips it."""
    type: str
    data: Dict[str, Any]


Action = Union[
    ClickAction,
    TypeAction,
    NavigationAction,
    SelectAction,
    ScreenshotAction,
    ScrollAction,
    WaitAction,
    TextSelectionAction,
    UnknownAction,
]

ACTION_MODELS: Dict[str, Type[BaseAction]] = {
    ActionType.CLICK.value: ClickAction,
    ActionType.TYPE.value: TypeAction,
    ActionType.NAVIGATION.value: NavigationAction,
    ActionType.SELECT.value: SelectAction,
    ActionType.SCREENSHOT.value: ScreenshotAction,
    ActionType.SCROLL.value: ScrollAction,
    ActionType.WAIT.value: WaitAction,
    ActionType.TEXT_SELECTION.value: TextSelectionAction,
}


def _describe(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        location = ".".join(str(p) for p in err["loc"]) or "<root>"
        parts.append(f"{location}: {err['msg']}")
    return "; ".join(parts)


def build_action(kind: Union[ActionType, str], timestamp: int, payload: Any) -> Action:
    """Create a known action from a kind and its payload (dict or payload model)."""
    try:
        kind = ActionType(kind)
    except ValueError:
        raise ActionValidationError(f"Unknown action kind: '{kind}'")

    model = ACTION_MODELS[kind.value]
    try:
        return model(timestamp=timestamp, data=payload)
    except ValidationError as e:
        raise ActionValidationError(f"Invalid {kind.value} payload: {_describe(e)}") from e


def parse_action(raw: Any, index: Optional[int] = None) -> Action:
    """Validate one serialized record. Never guesses a missing field."""
    if not isinstance(raw, dict):
        raise RecordingFormatError(f"expected an object, got {type(raw).__name__}", index)

    kind = raw.get("type")
    if not isinstance(kind, str) or not kind:
        raise RecordingFormatError("missing or empty 'type'", index)

    model = ACTION_MODELS.get(kind, UnknownAction)
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        raise RecordingFormatError(f"invalid '{kind}' record ({_describe(e)})", index) from e


def dump_action(action: BaseAction) -> Dict[str, Any]:
    dumped = action.model_dump(mode="json", by_alias=True)
    return {"type": dumped["type"], "timestamp": dumped["timestamp"], "data": dumped["data"]}


def dump_actions(actions: Iterable[BaseAction]) -> List[Dict[str, Any]]:
    return [dump_action(a) for a in actions]


def load_actions(raw: Any) -> List[Action]:
    if not isinstance(raw, list):
        raise RecordingFormatError(f"recording must be a JSON array, got {type(raw).__name__}")
    return [parse_action(item, index=i) for i, item in enumerate(raw)]
