# Replay timing (milliseconds)
DEFAULT_SELECTOR_TIMEOUT_MS = 5000
DEFAULT_NAVIGATION_TIMEOUT_MS = 30000
MAX_ACTION_GAP_MS = 5000
SELECTION_HOLD_MS = 1000

# Recording
SCROLL_DEBOUNCE_MS = 300
OPERATOR_WAIT_MS = 2000
BRIDGE_BINDING_NAME = "__webreplayEmit"

# Browser Settings
NAVIGATION_WAIT_UNTIL = "networkidle"
DEFAULT_VIEWPORT = {"width": 1280, "height": 800}

# Resource Limits
MAX_LOG_SIZE_BYTES = 10 * 1024 * 1024  # 10 MB

# Replay status markers for the CLI report
STATUS_STYLES = {
    "ok": "green",
    "fallback": "yellow",
    "failed": "red",
    "skipped": "dim"
}
