import pytest
from webreplay.core.errors import ActionValidationError, RecordingFormatError
from webreplay.recording.actions import (
    ActionType,
    ClickAction,
    TextSelectionAction,
    UnknownAction,
    WaitAction,
    build_action,
    dump_action,
    load_actions,
    parse_action
)

def test_build_click_action():
    action = build_action(ActionType.CLICK, 120, {"x": 10, "y": 20, "selector": "#go"})
    assert isinstance(action, ClickAction)
    assert action.type == ActionType.CLICK
    assert action.data.selector == "#go"
    assert action.data.x == 10

def test_build_action_accepts_plain_kind_string():
    action = build_action("wait", 0, {"duration": 2000})
    assert isinstance(action, WaitAction)
    assert action.data.duration == 2000

def test_build_action_rejects_unknown_kind():
    with pytest.raises(ActionValidationError):
        build_action("hover", 0, {})

def test_build_action_rejects_missing_field():
    with pytest.raises(ActionValidationError) as exc:
        build_action(ActionType.TYPE, 0, {"selector": "#name"})
    assert "text" in str(exc.value)

def test_negative_wait_rejected():
    with pytest.raises(ActionValidationError):
        build_action(ActionType.WAIT, 0, {"duration": -5})

def test_actions_are_immutable():
    action = build_action(ActionType.NAVIGATION, 0, {"url": "https://example.com"})
    with pytest.raises(Exception):
        action.timestamp = 5
    with pytest.raises(Exception):
        action.data.url = "https://other.example"

def test_text_selection_uses_camel_case_on_the_wire():
    action = build_action(ActionType.TEXT_SELECTION, 40, {"selector": "p", "selectedText": "hello"})
    assert action.data.selected_text == "hello"
    assert dump_action(action) == {
        "type": "text_selection",
        "timestamp": 40,
        "data": {"selector": "p", "selectedText": "hello"}
    }

def test_parse_known_record():
    action = parse_action({"type": "text_selection", "timestamp": 3, "data": {"selector": "#q", "selectedText": "x"}})
    assert isinstance(action, TextSelectionAction)

def test_parse_unknown_kind_is_kept():
    action = parse_action({"type": "hover", "timestamp": 7, "data": {"selector": "#menu"}})
    assert isinstance(action, UnknownAction)
    assert action.type == "hover"
    assert action.data == {"selector": "#menu"}

@pytest.mark.parametrize("raw", [
    "click",
    {"timestamp": 1, "data": {}},
    {"type": "", "timestamp": 1, "data": {}},
    {"type": "click", "data": {"selector": "#a"}},
    {"type": "click", "timestamp": -1, "data": {}},
    {"type": "navigation", "timestamp": 0, "data": {}},
    {"type": "hover", "timestamp": 0},
])
def test_parse_rejects_malformed_records(raw):
    with pytest.raises(RecordingFormatError):
        parse_action(raw)

def test_load_actions_reports_offending_index():
    raw = [
        {"type": "navigation", "timestamp": 0, "data": {"url": "https://example.com"}},
        {"type": "scroll", "timestamp": 10, "data": {"x": 0}},
    ]
    with pytest.raises(RecordingFormatError) as exc:
        load_actions(raw)
    assert exc.value.index == 1
    assert "action #1" in str(exc.value)

def test_load_actions_requires_a_list():
    with pytest.raises(RecordingFormatError):
        load_actions({"type": "click"})
