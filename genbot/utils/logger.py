# genbot/utils/logger.py
import json
import logging
import logging.config
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

# --- logging config path ---
PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_LOGGING_CONFIG_PATH = PROJECT_ROOT / 'logging_config.yaml'
BASIC_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] [%(request_id)s] - %(message)s"

_configured = False


class RequestContextFilter(logging.Filter):
    """Makes sure every record carries a request_id (defaults to N/A)."""

    def filter(self, record):
        record.request_id = getattr(record, 'request_id', 'N/A')
        return True


def _load_config(config_path: Path) -> Optional[Dict[str, Any]]:
    if not config_path.exists():
        print(f"Warning: Logging config file not found: {config_path}. Using basic logging.")
        return None
    try:
        with open(config_path, 'rt', encoding='utf-8') as f:
            log_config = yaml.safe_load(f.read())
    except Exception as e:
        print(f"Warning: Error reading logging config ({config_path}): {e}. Using basic logging.")
        return None
    if not isinstance(log_config, dict):
        print(f"Warning: Logging config file is empty or not a dictionary: {config_path}. Using basic logging.")
        return None

    # relative file handler paths are resolved against the project root
    for handler_name, handler_config in log_config.get('handlers', {}).items():
        if 'filename' not in handler_config:
            continue
        filename = Path(handler_config['filename'])
        if not filename.is_absolute():
            filename = (PROJECT_ROOT / filename).resolve()
            handler_config['filename'] = str(filename)
        try:
            filename.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            print(f"Warning: Failed to create log directory {filename.parent} for '{handler_name}': {e}")
    return log_config


def setup_logging(
        config_path: Union[str, Path, None] = None,
        default_level: Union[int, str] = logging.INFO,
        force: bool = False,
) -> None:
    """
    Configure logging from the YAML file, falling back to basicConfig on stdout.
    Runs once per process unless force=True, so Lambda entrypoints can call it on every invocation.
    """
    global _configured
    if _configured and not force:
        return

    config_path = Path(config_path) if config_path else DEFAULT_LOGGING_CONFIG_PATH
    log_config = _load_config(config_path)

    applied = False
    if log_config:
        try:
            logging.config.dictConfig(log_config)
            applied = True
        except Exception as e:
            print(f"CRITICAL: Error applying logging config from '{config_path}': {e}", file=sys.stderr)
            print("CRITICAL: Falling back to basic logging.", file=sys.stderr)
    if not applied:
        logging.basicConfig(level=default_level, format=BASIC_FORMAT, stream=sys.stdout, force=True)

    # --- attach the context filter to every handler ---
    context_filter = RequestContextFilter()
    loggers_to_process = [logging.root] + [
        logging.getLogger(name) for name in logging.root.manager.loggerDict
    ]
    for logger_instance in loggers_to_process:
        for handler in getattr(logger_instance, 'handlers', []):
            if not any(isinstance(f, RequestContextFilter) for f in handler.filters):
                handler.addFilter(context_filter)

    _configured = True


_loggers: Dict[str, logging.Logger] = {}


def get_logger(name: str) -> logging.Logger:
    """Return a cached logger by name."""
    if name not in _loggers:
        _loggers[name] = logging.getLogger(name)
    return _loggers[name]


# --- summaries of payloads for log lines ---
def _safe_serialize_value(value: Any, max_len: int) -> Any:
    if isinstance(value, dict):
        keys_preview = ", ".join(map(str, list(value.keys())[:3]))
        if len(value) > 3:
            keys_preview += "..."
        return f"{{Dict len={len(value)}, keys=[{keys_preview}]}}"
    elif isinstance(value, list):
        items_preview = ""
        if value:
            first_item_str = str(value[0])
            if len(first_item_str) > 30:
                first_item_str = first_item_str[:30] + "..."
            items_preview = f"items=[{first_item_str}" + ("...]" if len(value) > 1 else "]")
        return f"[List len={len(value)}, {items_preview}]"
    elif isinstance(value, str):
        if len(value) > max_len:
            return value[:max_len] + "..."
        return value
    elif isinstance(value, bytes):
        return f"<bytes len={len(value)}>"
    elif isinstance(value, (int, float, bool, type(None))):
        return value
    s_val = str(value)
    type_name = type(value).__name__
    if len(s_val) > max_len:
        return f"<{type_name} '{s_val[:max_len]}...'>"
    return f"<{type_name} '{s_val}'>"


def summarize_for_logging(
        data: Any,
        max_len: int = 100,
        fields_to_show: Optional[List[str]] = None,
        exclude_keys: Optional[List[str]] = None
) -> str:
    if hasattr(data, 'model_dump'):
        target_dict = data.model_dump(exclude_none=False)
    elif isinstance(data, dict):
        target_dict = dict(data)
    else:
        return str(_safe_serialize_value(data, max_len))

    keys_to_exclude = set(exclude_keys) if exclude_keys else set()
    if fields_to_show is not None:
        keys_to_process = [k for k in fields_to_show if k in target_dict and k not in keys_to_exclude]
    else:
        keys_to_process = [k for k in target_dict if k not in keys_to_exclude]

    summary = {k: _safe_serialize_value(target_dict[k], max_len) for k in keys_to_process}
    return json.dumps(summary, ensure_ascii=False, default=str)
