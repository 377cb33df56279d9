import json
from pathlib import Path
from typing import Iterable, List, Union

from webreplay.core.errors import RecordingFormatError
from webreplay.core.logging import log
from webreplay.recording.actions import Action, BaseAction, dump_actions, load_actions
from webreplay.utils.file_io import write_json


def dumps(actions: Iterable[BaseAction]) -> str:
    return json.dumps(dump_actions(actions), indent=2, ensure_ascii=False)


def loads(text: str) -> List[Action]:
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise RecordingFormatError(f"not valid JSON: {e}") from e
    return load_actions(raw)


def save_recording(path: Union[str, Path], actions: Iterable[BaseAction]) -> Path:
    """Write a recording as a UTF-8 JSON array."""
    path = Path(path)
    data = dump_actions(actions)
    write_json(path, data)
    log(f"Recording saved to {path}", count=len(data))
    return path


def load_recording(path: Union[str, Path]) -> List[Action]:
    """
    Read a recording from disk.

    Unlike settings files, a recording is never read leniently: a missing file,
    bad JSON or a malformed action raises RecordingFormatError.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise RecordingFormatError(f"recording not found: {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise RecordingFormatError(f"cannot read {path}: {e}") from e

    try:
        actions = loads(text)
    except RecordingFormatError as e:
        log(f"Rejected recording {path.name}: {e}", level="error")
        raise
    log(f"Loaded {len(actions)} actions from {path}")
    return actions
