from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .errors import ConfigError
from .lib import brew, xcode
from .logging_utils import DEFAULT_LOG_PATH

PROFILES_DIR = Path(__file__).resolve().parent / "manifests" / "profiles"
DEFAULT_PROFILE = "default"

_PLACEHOLDER_RE = re.compile(r"\{(home|dotfiles|brew_prefix)\}")


@dataclass(frozen=True)
class SymlinkSpec:
    source: str
    dest: str


@dataclass(frozen=True)
class StoreAppSpec:
    app_id: Optional[int] = None
    name: Optional[str] = None

    @property
    def label(self) -> str:
        if self.name and self.app_id is not None:
            return f"{self.name} ({self.app_id})"
        return self.name or str(self.app_id)


@dataclass(frozen=True)
class ToolchainSpec:
    tool: str
    module: str
    binary: str


@dataclass(frozen=True)
class RepositorySpec:
    url: str
    dest: str


@dataclass(frozen=True)
class ShellLineSpec:
    file: str
    line: str
    marker: Optional[str] = None


def expand(value: str, variables: Mapping[str, str]) -> str:
    """Expand ``{home}``/``{dotfiles}``/``{brew_prefix}`` and a leading ``~``.

    Other braces (e.g. ``${PATH}``) are left untouched.
    """

    out = _PLACEHOLDER_RE.sub(lambda m: variables.get(m.group(1), m.group(0)), value)
    if out == "~" or out.startswith("~/"):
        home = variables.get("home") or os.path.expanduser("~")
        return home + out[1:]
    return out


@dataclass(frozen=True)
class Profile:
    raw: Dict[str, Any]
    home: str
    brew_prefix: str

    @property
    def name(self) -> str:
        return str(self.raw.get("name") or DEFAULT_PROFILE)

    @property
    def variables(self) -> Dict[str, str]:
        v = {"home": self.home, "brew_prefix": self.brew_prefix}
        dotfiles = (self.raw.get("paths") or {}).get("dotfiles") or "{home}/dotfiles"
        v["dotfiles"] = expand(str(dotfiles), v)
        return v

    def _x(self, value: Any) -> str:
        return expand(str(value), self.variables)

    def _path(self, value: Any) -> str:
        """Expand a path; relative paths are taken from the home directory."""
        p = self._x(value)
        return p if os.path.isabs(p) else os.path.join(self.home, p)

    @property
    def log_path(self) -> str:
        return self._x(self.raw.get("log_path") or DEFAULT_LOG_PATH)

    @property
    def prerequisites(self) -> Dict[str, Any]:
        return dict(self.raw.get("prerequisites") or {})

    @property
    def install_xcode_cli(self) -> bool:
        return bool(self.prerequisites.get("xcode_cli", False))

    @property
    def install_homebrew(self) -> bool:
        return bool(self.prerequisites.get("homebrew", True))

    @property
    def xcode_timeout_s(self) -> float:
        return float(self.prerequisites.get("xcode_timeout_s", xcode.DEFAULT_TIMEOUT_S))

    @property
    def xcode_poll_interval_s(self) -> float:
        return float(self.prerequisites.get("xcode_poll_interval_s", xcode.DEFAULT_POLL_INTERVAL_S))

    def maintenance(self, key: str) -> bool:
        return bool((self.raw.get("maintenance") or {}).get(key, False))

    @property
    def taps(self) -> List[str]:
        return [str(t) for t in self.raw.get("taps") or []]

    @property
    def packages(self) -> List[str]:
        return [str(p) for p in self.raw.get("packages") or []]

    @property
    def casks(self) -> List[str]:
        return [str(c) for c in self.raw.get("casks") or []]

    @property
    def store_apps(self) -> List[StoreAppSpec]:
        apps: List[StoreAppSpec] = []
        for item in self.raw.get("store_apps") or []:
            if isinstance(item, int) and not isinstance(item, bool):
                apps.append(StoreAppSpec(app_id=item))
            elif isinstance(item, str):
                apps.append(StoreAppSpec(name=item))
            else:
                app_id = item.get("id")
                apps.append(
                    StoreAppSpec(
                        app_id=int(app_id) if app_id is not None else None,
                        name=str(item["name"]) if item.get("name") else None,
                    )
                )
        return apps

    @property
    def toolchain(self) -> List[ToolchainSpec]:
        return [
            ToolchainSpec(
                tool=str(t.get("tool") or "go"),
                module=str(t["module"]),
                binary=str(t.get("binary") or str(t["module"]).split("@")[0].rsplit("/", 1)[-1]),
            )
            for t in self.raw.get("toolchain") or []
        ]

    @property
    def repositories(self) -> List[RepositorySpec]:
        return [RepositorySpec(url=str(r["url"]), dest=self._x(r["dest"])) for r in self.raw.get("repositories") or []]

    @property
    def symlinks(self) -> List[SymlinkSpec]:
        return [SymlinkSpec(source=self._path(s["source"]), dest=self._path(s["dest"])) for s in self.raw.get("symlinks") or []]

    @property
    def shell_lines(self) -> List[ShellLineSpec]:
        return [
            ShellLineSpec(
                file=self._x(s["file"]),
                line=self._x(s["line"]),
                marker=str(s["marker"]) if s.get("marker") else None,
            )
            for s in self.raw.get("shell_lines") or []
        ]

    @property
    def default_shell(self) -> Optional[str]:
        v = self.raw.get("default_shell")
        return self._x(v) if v else None


_LIST_KEYS = ("taps", "packages", "casks", "store_apps", "toolchain", "repositories", "symlinks", "shell_lines")
_REQUIRED = {
    "toolchain": ("module",),
    "repositories": ("url", "dest"),
    "symlinks": ("source", "dest"),
    "shell_lines": ("file", "line"),
}


def validate(raw: Dict[str, Any], *, origin: str = "<config>") -> None:
    for key in _LIST_KEYS:
        value = raw.get(key)
        if value is None:
            continue
        if not isinstance(value, list):
            raise ConfigError(f"{origin}: '{key}' must be a list")
        for i, item in enumerate(value):
            if key in _REQUIRED:
                if not isinstance(item, dict):
                    raise ConfigError(f"{origin}: {key}[{i}] must be a mapping")
                missing = [k for k in _REQUIRED[key] if not item.get(k)]
                if missing:
                    raise ConfigError(f"{origin}: {key}[{i}] missing {', '.join(missing)}")
            elif key == "store_apps":
                if isinstance(item, dict):
                    if item.get("id") is None and not item.get("name"):
                        raise ConfigError(f"{origin}: store_apps[{i}] needs an id or a name")
                    if item.get("id") is not None and not str(item["id"]).isdigit():
                        raise ConfigError(f"{origin}: store_apps[{i}] id must be numeric")
                elif isinstance(item, bool) or not isinstance(item, (int, str)):
                    raise ConfigError(f"{origin}: store_apps[{i}] must be an id, a name or a mapping")
            elif not isinstance(item, str) or not item.strip():
                raise ConfigError(f"{origin}: {key}[{i}] must be a non-empty string")

    for key in ("prerequisites", "maintenance", "paths"):
        if raw.get(key) is not None and not isinstance(raw[key], dict):
            raise ConfigError(f"{origin}: '{key}' must be a mapping")

    prereq = raw.get("prerequisites") or {}
    for key in ("xcode_cli", "homebrew"):
        _check_flag(prereq, key, f"{origin}: prerequisites.{key}")
    for key in ("xcode_timeout_s", "xcode_poll_interval_s"):
        value = prereq.get(key)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise ConfigError(f"{origin}: prerequisites.{key} must be a positive number of seconds")
    maintenance = raw.get("maintenance") or {}
    for key in maintenance:
        _check_flag(maintenance, key, f"{origin}: maintenance.{key}")


def _check_flag(section: Dict[str, Any], key: str, where: str) -> None:
    if section.get(key) is not None and not isinstance(section[key], bool):
        raise ConfigError(f"{where} must be true or false")


def _read_yaml(p: Path) -> Dict[str, Any]:
    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ConfigError(f"Configuration must be YAML: {p}")
    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read {p}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"{p} must contain a mapping/object")
    return raw


def _profile_path(name: str, search_dir: Optional[Path] = None) -> Path:
    for d in [search_dir, PROFILES_DIR]:
        if d is None:
            continue
        for ext in (".yaml", ".yml"):
            candidate = d / f"{name}{ext}"
            if candidate.exists():
                return candidate
    raise ConfigError(f"Unknown profile: {name}")


def _load_merged(p: Path, seen: List[Path]) -> Dict[str, Any]:
    resolved = p.resolve()
    if resolved in seen:
        chain = " -> ".join(str(s) for s in [*seen, resolved])
        raise ConfigError(f"Profile inheritance cycle: {chain}")
    raw = _read_yaml(p)
    parent_name = raw.pop("extends", None)
    if not parent_name:
        return raw
    parent = _load_merged(_profile_path(str(parent_name), p.parent), [*seen, resolved])
    merged = dict(parent)
    merged.update(raw)
    return merged


def load_config(
    path: str,
    *,
    home: Optional[str] = None,
    brew_prefix: Optional[str] = None,
) -> Profile:
    p = Path(path).expanduser()
    if not p.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    raw = _load_merged(p, [])
    validate(raw, origin=str(p))

    prefix = brew_prefix or raw.get("brew_prefix") or brew.default_prefix()
    return Profile(raw=raw, home=home or os.path.expanduser("~"), brew_prefix=str(prefix))


def load_profile(name: str = DEFAULT_PROFILE, **kwargs: Any) -> Profile:
    """Load one of the built-in profiles shipped under manifests/profiles."""

    return load_config(str(_profile_path(name)), **kwargs)


def available_profiles() -> List[str]:
    return sorted(p.stem for p in PROFILES_DIR.glob("*.yaml"))
