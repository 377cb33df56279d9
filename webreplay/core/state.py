from enum import Enum

class RecorderState(Enum):
    IDLE = "IDLE"
    RECORDING = "RECORDING"
    STOPPED = "STOPPED"

class ActionStatus(str, Enum):
    OK = "ok"
    FALLBACK = "fallback"
    FAILED = "failed"
    SKIPPED = "skipped"
