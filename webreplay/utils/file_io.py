import json
import traceback
from pathlib import Path
from typing import Any
from webreplay.core.logging import log

def safe_read_json(path: Path, default: Any = None) -> Any:
    """
    Read a JSON file, falling back to `default` on any problem.
    Used for settings, never for recordings.
    """
    if default is None:
        default = {}

    try:
        if path.exists():
            content = path.read_text(encoding="utf-8")
            if not content.strip():
                return default
            return json.loads(content)
    except json.JSONDecodeError as e:
        log(f"Corrupted JSON in {path.name}: {e}", level="error")
    except PermissionError as e:
        log(f"Permission denied reading {path.name}: {e}", level="error")
    except OSError as e:
        log(f"IO error reading {path.name}: {e}", level="warning")

    return default

def safe_write_json(path: Path, data: Any) -> bool:
    """
    Write data to a JSON file, ensuring parent directories exist.
    """
    try:
        write_json(path, data)
        return True
    except PermissionError as e:
        log(f"Permission denied writing to {path.name}: {e}", level="error")
    except OSError as e:
        log(f"IO error writing to {path.name}: {e}", level="error")
    except Exception:
        log(f"Unexpected error writing to {path.name}: {traceback.format_exc()}", level="error")
        raise

    return False

def write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
