"""Load settings from ~/.wakatime.cfg and the ~/.wakamonthrc YAML file."""

from __future__ import annotations

import configparser
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytz
import yaml

from .config import (
    BACKEND_PREFIXES,
    DAY_FILL_TARGET_MINUTES,
    DEFAULT_BACKEND,
    DEFAULT_IGNORE_REGEX,
    DEFAULT_PRECISION_MINUTES,
    DEFAULT_SPREAD_UNALLOCATED,
    FILL_INCREMENT_MINUTES,
    SMALL_TICKET_MINUTES,
    TIMEZONE,
    WAKAMONTH_RC_PATH,
    WAKATIME_CONFIG_PATH,
)
from .errors import ConfigurationError
from .models import AllocationConfig, compile_ignore_pattern

DEFAULT_API_URL = "https://api.wakatime.com/api"


@dataclass(slots=True)
class AutolinkSettings:
    enabled: bool = False
    issue_regex: str = r"\d+"
    url: str = ""


@dataclass(slots=True)
class Settings:
    api_url: str
    api_key: str
    backend: str = DEFAULT_BACKEND
    precision: int = DEFAULT_PRECISION_MINUTES
    spread_unallocated: bool = DEFAULT_SPREAD_UNALLOCATED
    timezone: str = TIMEZONE
    ignore_regex: str = DEFAULT_IGNORE_REGEX
    fill_target_minutes: int = DAY_FILL_TARGET_MINUTES
    small_ticket_minutes: int = SMALL_TICKET_MINUTES
    fill_increment_minutes: int = FILL_INCREMENT_MINUTES
    autolink: AutolinkSettings = field(default_factory=AutolinkSettings)
    export_dir: Path = field(default_factory=Path.home)

    def validate(self) -> None:
        if not self.api_url:
            raise ConfigurationError("api_url missing; set it in ~/.wakatime.cfg or ~/.wakamonthrc")
        if not self.api_key:
            raise ConfigurationError("api_key missing; set it in ~/.wakatime.cfg or ~/.wakamonthrc")
        if self.backend not in BACKEND_PREFIXES:
            raise ConfigurationError(
                f"backend must be one of {sorted(BACKEND_PREFIXES)}, got {self.backend!r}"
            )
        try:
            pytz.timezone(self.timezone)
        except pytz.UnknownTimeZoneError as exc:
            raise ConfigurationError(f"Unknown timezone {self.timezone!r}") from exc
        if self.autolink.enabled:
            if not self.autolink.url:
                raise ConfigurationError("autolink.enabled requires autolink.url")
            compile_ignore_pattern(self.autolink.issue_regex)
        # Surfaces precision / pattern / fill-day problems up front.
        self.allocation_config(fill_day=True)

    def allocation_config(self, *, fill_day: bool = False) -> AllocationConfig:
        return AllocationConfig(
            precision_minutes=self.precision,
            spread_unallocated=self.spread_unallocated,
            ignore_pattern=compile_ignore_pattern(self.ignore_regex),
            fill_day_target_minutes=self.fill_target_minutes if fill_day else None,
            small_ticket_minutes=self.small_ticket_minutes,
            fill_increment_minutes=self.fill_increment_minutes,
        )


def read_wakatime_config(path: str | Path = WAKATIME_CONFIG_PATH) -> dict[str, str]:
    """Return ``api_url`` / ``api_key`` from the WakaTime client INI file."""
    path = Path(path)
    if not path.exists():
        return {}
    parser = configparser.ConfigParser(interpolation=None)
    try:
        parser.read(path, encoding="utf-8")
    except configparser.Error as exc:
        raise ConfigurationError(f"Unreadable {path}: {exc}") from exc
    if not parser.has_section("settings"):
        return {}
    section = parser["settings"]
    return {key: section[key] for key in ("api_url", "api_key") if section.get(key)}


def read_rc(path: str | Path = WAKAMONTH_RC_PATH) -> dict[str, Any]:
    path = Path(path)
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Unreadable {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping, got {type(data).__name__}")
    return data


def normalize_api_url(url: str) -> str:
    """Strip a trailing ``/v1`` so endpoint paths can be appended uniformly."""
    url = (url or "").strip().rstrip("/")
    return re.sub(r"/v1$", "", url)


def _as_int(value: Any, key: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{key} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{key} must be an integer, got {value!r}") from exc


def _as_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "yes", "1", "false", "no", "0"}:
        return value.strip().lower() in {"true", "yes", "1"}
    raise ConfigurationError(f"{key} must be a boolean, got {value!r}")


def load_settings(
    rc_path: str | Path | None = None,
    wakatime_path: str | Path | None = None,
) -> Settings:
    """Merge defaults, the WakaTime INI file, and the rc file (last wins)."""
    waka = read_wakatime_config(wakatime_path or WAKATIME_CONFIG_PATH)
    rc = read_rc(rc_path or WAKAMONTH_RC_PATH)

    include = rc.get("include") or {}
    fill = rc.get("fill_day") or {}
    autolink = rc.get("autolink") or {}
    if not all(isinstance(v, dict) for v in (include, fill, autolink)):
        raise ConfigurationError("include, fill_day and autolink must be mappings")

    settings = Settings(
        api_url=normalize_api_url(rc.get("api_url") or waka.get("api_url") or DEFAULT_API_URL),
        api_key=str(rc.get("api_key") or waka.get("api_key") or ""),
        backend=str(rc.get("backend", DEFAULT_BACKEND)),
        precision=_as_int(rc.get("precision", DEFAULT_PRECISION_MINUTES), "precision"),
        spread_unallocated=_as_bool(
            rc.get("spread_unallocated", DEFAULT_SPREAD_UNALLOCATED), "spread_unallocated"
        ),
        timezone=str(rc.get("timezone", TIMEZONE)),
        ignore_regex=str(include.get("ignore_regex", DEFAULT_IGNORE_REGEX)),
        fill_target_minutes=_as_int(
            fill.get("target_minutes", DAY_FILL_TARGET_MINUTES), "fill_day.target_minutes"
        ),
        small_ticket_minutes=_as_int(
            fill.get("small_ticket_minutes", SMALL_TICKET_MINUTES), "fill_day.small_ticket_minutes"
        ),
        fill_increment_minutes=_as_int(
            fill.get("increment_minutes", FILL_INCREMENT_MINUTES), "fill_day.increment_minutes"
        ),
        autolink=AutolinkSettings(
            enabled=_as_bool(autolink.get("enabled", False), "autolink.enabled"),
            issue_regex=str(autolink.get("issue_regex", r"\d+")),
            url=str(autolink.get("url", "")),
        ),
        export_dir=Path(rc["export_dir"]).expanduser() if rc.get("export_dir") else Path.home(),
    )
    settings.validate()
    return settings
