"""Configuration parsing and normalization helpers for customdns.

Brief:
  This module centralizes:
    - reading YAML config files
    - normalizing camelCase keys (``customDNS``, ``customTTL``) to field names
    - parsing Go-style durations such as ``1h30m``
    - pydantic validation of the custom DNS block

Inputs:
  - YAML config files and plain mappings

Outputs:
  - Validated AppConfig / CustomDNSConfig instances
"""

from __future__ import annotations

import re
from datetime import timedelta
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, validator


class ConfigError(ValueError):
    """Raised when a configuration file cannot be read as valid configuration."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)


_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")
_NUMBER = re.compile(r"[+-]?(\d+(?:\.\d*)?|\.\d+)")


def parse_duration(value: object) -> timedelta:
    """Brief: Parse a duration in Go notation, seconds, or as a timedelta.

    Inputs:
      - value: timedelta, int/float seconds, numeric string ("300"), or a
        string of <number><unit> parts ("1h", "1h30m", "500ms", "-5m").

    Outputs:
      - timedelta.

    Raises:
      - ValueError: When value cannot be interpreted as a duration.

    Example:
        >>> parse_duration("1h30m").total_seconds()
        5400.0
        >>> parse_duration(90)
        datetime.timedelta(seconds=90)
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool):
        raise ValueError(f"invalid duration {value!r}")
    if isinstance(value, (int, float)):
        return timedelta(seconds=value)
    if not isinstance(value, str):
        raise ValueError(f"invalid duration {value!r}")

    text = value.strip()
    if not text:
        raise ValueError("empty duration")
    if _NUMBER.fullmatch(text):
        return timedelta(seconds=float(text))

    sign = 1.0
    if text[0] in "+-":
        sign = -1.0 if text[0] == "-" else 1.0
        text = text[1:]

    total = 0.0
    pos = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            break
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    if pos == 0 or pos != len(text):
        raise ValueError(f"invalid duration {value!r}")
    return timedelta(seconds=sign * total)


def _split_addresses(raw: object) -> List[str]:
    if raw is None:
        return []
    if isinstance(raw, str):
        entries = raw.split(",")
    elif isinstance(raw, (list, tuple)):
        entries = [str(x) for x in raw if x is not None]
    else:
        entries = [str(raw)]
    return [e.strip() for e in entries if e.strip()]


class CustomDNSConfig(BaseModel):
    """Brief: Typed configuration model for CustomDNSResolver.

    Inputs:
      - mapping: Host name -> addresses. Values may be a list or a single
        comma-separated string ("192.168.1.2, 2001:db8::2").
      - custom_ttl (or customTTL): TTL applied to every synthesized record;
        a Go-style duration ("1h", "30m"), seconds (3600), or an ISO-8601
        duration ("PT5M"). Defaults to one hour.

    Outputs:
      - CustomDNSConfig instance with mapping values as lists of stripped
        address strings. Addresses are not validated here; the resolver skips
        entries it cannot use.

    Example:
        >>> cfg = CustomDNSConfig(mapping={"nas.lan": "10.0.0.2, ::2"})
        >>> cfg.mapping["nas.lan"]
        ['10.0.0.2', '::2']
    """

    mapping: Dict[str, List[str]] = Field(default_factory=dict)
    custom_ttl: timedelta = Field(default=timedelta(hours=1))

    def __init__(self, **data: Any) -> None:
        super().__init__(**normalize_keys(data))

    @validator("mapping", pre=True)
    def _normalize_mapping(cls, v):  # type: ignore[no-untyped-def]
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError("mapping must be a mapping of host names to addresses")
        out: Dict[str, List[str]] = {}
        for host, raw in v.items():
            name = str(host).strip()
            if not name:
                raise ValueError("mapping contains an empty host name")
            out[name] = _split_addresses(raw)
        return out

    @validator("custom_ttl", pre=True)
    def _parse_custom_ttl(cls, v):  # type: ignore[no-untyped-def]
        if v is None:
            return timedelta(hours=1)
        try:
            return parse_duration(v)
        except ValueError:
            if isinstance(v, str):
                # Not Go notation; leave ISO-8601 strings to pydantic.
                return v.strip()
            raise

    @validator("custom_ttl")
    def _non_negative_ttl(cls, v):  # type: ignore[no-untyped-def]
        if v < timedelta(0):
            raise ValueError("custom_ttl must not be negative")
        return v

    class Config:
        extra = "ignore"


class AppConfig(BaseModel):
    """Brief: Root configuration: logging block plus the custom DNS block."""

    logging: Dict[str, Any] = Field(default_factory=dict)
    custom_dns: CustomDNSConfig = Field(default_factory=CustomDNSConfig)

    def __init__(self, **data: Any) -> None:
        super().__init__(**normalize_keys(data))

    @validator("logging", pre=True)
    def _logging_block(cls, v):  # type: ignore[no-untyped-def]
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError("logging must be a mapping when present")
        return v

    class Config:
        extra = "ignore"


_CAMEL_1 = re.compile(r"(.)([A-Z][a-z]+)")
_CAMEL_2 = re.compile(r"([a-z0-9])([A-Z]+)")


def _camel_to_snake(name: str) -> str:
    s1 = _CAMEL_1.sub(r"\1_\2", name)
    s2 = _CAMEL_2.sub(r"\1_\2", s1)
    return s2.lower().replace("-", "_")


def normalize_keys(section: Dict[str, Any]) -> Dict[str, Any]:
    """Brief: Rewrite top-level camelCase keys of a config section to snake_case.

    Inputs:
      - section: Parsed YAML mapping.

    Outputs:
      - dict: Shallow copy with keys such as "customDNS" -> "custom_dns" and
        "customTTL" -> "custom_ttl". Nested values are left untouched, so
        host names inside ``mapping`` keep their spelling.
    """
    return {_camel_to_snake(str(k)): v for k, v in section.items()}


def load_config(cfg: Dict[str, Any], *, config_path: Optional[str] = None) -> AppConfig:
    """Brief: Validate a parsed configuration mapping.

    Inputs:
      - cfg: Mapping as loaded from YAML.
      - config_path: Optional path used in error messages.

    Outputs:
      - AppConfig.

    Raises:
      - ConfigError: When the mapping fails validation.
    """
    if not isinstance(cfg, dict):
        raise ConfigError("configuration root must be a mapping", config_path)

    data = normalize_keys(cfg)
    custom = data.get("custom_dns")
    if custom is not None:
        if not isinstance(custom, dict):
            raise ConfigError("customDNS must be a mapping when present", config_path)
        data["custom_dns"] = normalize_keys(custom)

    try:
        return AppConfig(**data)
    except ValidationError as exc:
        raise ConfigError(f"invalid configuration: {exc}", config_path) from exc


def parse_config_file(config_path: str) -> AppConfig:
    """Brief: Read and validate a YAML config file.

    Inputs:
      - config_path: Path to the YAML configuration file.

    Outputs:
      - AppConfig; an empty file yields the defaults.

    Raises:
      - OSError: When the file cannot be opened.
      - ConfigError: On YAML syntax errors or failed validation.
    """
    with open(config_path, "r", encoding="utf-8") as f:
        try:
            cfg = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigError(f"invalid YAML: {exc}", config_path) from exc

    return load_config(cfg or {}, config_path=config_path)
