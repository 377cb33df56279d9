import time
from typing import Any, Callable, Iterable, List, Optional, Tuple, Union

from webreplay.core.logging import log
from webreplay.core.state import RecorderState
from webreplay.recording.actions import Action, ActionType, build_action


class RecordingSession:
    """
    Owns one ordered action log.

    IDLE -> RECORDING on start(), RECORDING -> STOPPED on stop(), and start()
    again from any state discards the previous log. record_action() only has
    an effect while RECORDING; in every other state it is a silent no-op
    because the page bridge forwards events regardless of recorder state.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        # Seconds, monotonic by default so timestamps never jump with the wall clock
        self._clock = clock or time.monotonic
        self._actions: List[Action] = []
        self._start_time: Optional[float] = None
        self._last_timestamp = 0
        self.state = RecorderState.IDLE

    @property
    def is_recording(self) -> bool:
        return self.state is RecorderState.RECORDING

    @property
    def actions(self) -> Tuple[Action, ...]:
        return tuple(self._actions)

    def start(self) -> None:
        self._actions = []
        self._start_time = self._clock()
        self._last_timestamp = 0
        self.state = RecorderState.RECORDING
        log("Recording started.")

    def stop(self) -> List[Action]:
        if self.is_recording:
            self.state = RecorderState.STOPPED
            log(f"Recording stopped with {len(self._actions)} action(s).")
        return list(self._actions)

    def record_action(self, kind: Union[ActionType, str], payload: Any) -> Optional[Action]:
        if not self.is_recording:
            return None

        elapsed = round((self._clock() - self._start_time) * 1000)
        timestamp = max(elapsed, self._last_timestamp)
        action = build_action(kind, timestamp, payload)

        self._actions.append(action)
        self._last_timestamp = timestamp
        log(f"Recorded action: {action.type}", level="debug", action_type=action.type, timestamp=timestamp)
        return action

    def load(self, actions: Iterable[Action]) -> None:
        """Replace the log with a previously stored recording."""
        self._actions = list(actions)
        self._start_time = None
        self._last_timestamp = self._actions[-1].timestamp if self._actions else 0
        self.state = RecorderState.STOPPED
        log(f"Loaded {len(self._actions)} action(s) into the session.")
