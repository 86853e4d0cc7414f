"""Configuration loading: JSON config files, flag overrides and defaults."""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .defaults import (
    CONFIG_FILE_KEYS,
    INTEGER_KEYS,
    STRING_KEYS,
    DEFAULT_CONTENT_TYPE,
    DEFAULT_METHOD,
    DEFAULT_PARALLEL_COUNT,
    DEFAULT_TIMEOUT,
    DEFAULT_TOTAL_REQUESTS,
)
from .models import BenchmarkConfig

logger = logging.getLogger(__name__)

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


class ConfigError(ValueError):
    """Raised for configuration that cannot be turned into a benchmark run."""


def parse_duration(value: Any) -> float:
    """
    Parse a timeout into seconds.

    Accepts numbers (seconds) and duration strings such as "300ms", "1.5s"
    or "1h30m".
    """
    if isinstance(value, bool):
        raise ConfigError(f"invalid timeout format '{value}'")
    if isinstance(value, (int, float)):
        seconds = float(value)
    else:
        text = str(value).strip()
        try:
            seconds = float(text)
        except ValueError:
            seconds = _parse_duration_string(text)

    if seconds <= 0:
        raise ConfigError(f"timeout must be positive, got '{value}'")
    return seconds


def _parse_duration_string(text: str) -> float:
    if not text:
        raise ConfigError("invalid timeout format ''")

    seconds = 0.0
    pos = 0
    while pos < len(text):
        match = _DURATION_PART.match(text, pos)
        if not match:
            raise ConfigError(f"invalid timeout format '{text}'")
        seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    return seconds


def parse_key_value_pairs(text: Optional[str], separator: str) -> Dict[str, str]:
    """
    Parse "key1<sep>value1,key2<sep>value2" into a dict.

    Pairs without the separator and pairs with an empty key are skipped.
    """
    result: Dict[str, str] = {}
    if not text:
        return result

    for pair in text.split(","):
        parts = pair.strip().split(separator, 1)
        if len(parts) != 2:
            continue
        key = parts[0].strip()
        if key:
            result[key] = parts[1].strip()
    return result


def load_config_file(path: str) -> Dict[str, Any]:
    """Read a JSON config file into a dict of known keys."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigError(f"could not read config file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid JSON in config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a JSON object")

    unknown = sorted(set(data) - set(CONFIG_FILE_KEYS))
    if unknown:
        logger.warning(f"Ignoring unknown keys in config file {path}: {', '.join(unknown)}")
        data = {k: v for k, v in data.items() if k in CONFIG_FILE_KEYS}

    for key in STRING_KEYS:
        value = data.get(key)
        if value is not None and not isinstance(value, str):
            raise ConfigError(f"'{key}' in config file {path} must be a string")

    for key in INTEGER_KEYS:
        value = data.get(key)
        if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
            raise ConfigError(f"'{key}' in config file {path} must be an integer")

    timeout = data.get("timeout")
    if timeout is not None and (
        isinstance(timeout, bool) or not isinstance(timeout, (str, int, float))
    ):
        raise ConfigError(f"'timeout' in config file {path} must be a string or number")

    for key in ("headers", "parameters"):
        value = data.get(key)
        if value is None:
            continue
        if not isinstance(value, dict):
            raise ConfigError(f"'{key}' in config file {path} must be an object")
        if not all(isinstance(v, str) for v in value.values()):
            raise ConfigError(f"values of '{key}' in config file {path} must be strings")

    return data


def _positive_int(name: str, value: Any, default: int) -> int:
    if value is None:
        return default
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{name} must be an integer, got '{value}'") from e
    if number < 0:
        raise ConfigError(f"{name} must not be negative, got {number}")
    return number or default


def read_post_data(path: str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"could not read POST data file {path}: {e}") from e


def resolve_config(
    overrides: Mapping[str, Any],
    config_file: Optional[str] = None,
    extra_headers: Optional[str] = None,
    extra_params: Optional[str] = None,
) -> BenchmarkConfig:
    """
    Merge defaults, an optional config file and explicit overrides.

    Args:
        overrides: Config-file keys set explicitly on the command line
            (None values are ignored)
        config_file: Path to a JSON config file
        extra_headers: "key:value,..." headers merged into the file's headers
        extra_params: "key=value,..." parameters merged into the file's parameters

    Raises:
        ConfigError: If the merged configuration is not usable
    """
    values: Dict[str, Any] = {}
    if config_file:
        values.update(load_config_file(config_file))
        logger.debug(f"Loaded config file {config_file}")

    values.update({k: v for k, v in overrides.items() if v is not None})

    headers = {str(k): str(v) for k, v in (values.get("headers") or {}).items()}
    headers.update(parse_key_value_pairs(extra_headers, ":"))
    parameters = {str(k): str(v) for k, v in (values.get("parameters") or {}).items()}
    parameters.update(parse_key_value_pairs(extra_params, "="))

    url = values.get("url")
    if not url:
        raise ConfigError("URL is required (use --url or a config file)")

    post_data = values.get("post_data") or None
    post_data_file = values.get("post_data_file") or None
    if post_data_file and not post_data:
        post_data = read_post_data(post_data_file)

    return BenchmarkConfig(
        url=str(url),
        method=str(values.get("method") or DEFAULT_METHOD).upper(),
        auth_token=values.get("auth_token") or None,
        total_requests=_positive_int(
            "total_requests", values.get("total_requests"), DEFAULT_TOTAL_REQUESTS
        ),
        parallel_count=_positive_int(
            "parallel_count", values.get("parallel_count"), DEFAULT_PARALLEL_COUNT
        ),
        timeout_seconds=parse_duration(values.get("timeout") or DEFAULT_TIMEOUT),
        headers=headers,
        parameters=parameters,
        post_data=post_data,
        post_data_file=post_data_file,
        content_type=values.get("content_type") or DEFAULT_CONTENT_TYPE,
        dump_failures_dir=values.get("dump_failures_dir") or None,
    )
