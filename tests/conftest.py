"""
Pytest configuration and fixtures for macstrap tests.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Generator, List, Optional, Set, Tuple

import pytest

from macstrap.config import Profile, validate
from macstrap.logging_utils import RunLogger, reset_logging
from macstrap.results import ActionOutcome, FailureLog


class FakeActions:
    """In-memory ActionRegistry: deterministic, records every action call."""

    def __init__(
        self,
        *,
        installed: Optional[Set[str]] = None,
        casks: Optional[Set[str]] = None,
        failing: Optional[Set[str]] = None,
        store_catalog: Optional[Dict[str, int]] = None,
        shell: str = "/bin/zsh",
    ) -> None:
        self.dry_run = False
        self.installed: Set[str] = set(installed or ())
        self.casks: Set[str] = set(casks or ())
        self.failing: Set[str] = set(failing or ())
        self.store_catalog: Dict[str, int] = dict(store_catalog or {})
        self.store_installed: Set[int] = set()
        self.taps: Set[str] = set()
        self.binaries: Set[str] = set()
        self.clones: Set[str] = set()
        self.links: Dict[str, str] = {}
        self.lines: Dict[str, List[str]] = {}
        self.shell = shell
        self.xcode = False
        self.brew = True
        self.calls: List[Tuple[str, Any]] = []

    def _do(self, op: str, key: Any) -> ActionOutcome:
        self.calls.append((op, key))
        if key in self.failing:
            return ActionOutcome.failed(f"{op} {key}: not found", kind="not_found")
        return ActionOutcome.ok(f"{op} {key}")

    def xcode_installed(self) -> bool:
        return self.xcode

    def install_xcode(self, *, timeout_s: float, poll_interval_s: float) -> ActionOutcome:
        out = self._do("install_xcode", "xcode")
        if out.success:
            self.xcode = True
        return out

    def brew_installed(self) -> bool:
        return self.brew

    def install_brew(self) -> ActionOutcome:
        out = self._do("install_brew", "brew")
        if out.success:
            self.brew = True
        return out

    def brew_update(self) -> ActionOutcome:
        return self._do("brew_update", "update")

    def brew_upgrade(self) -> ActionOutcome:
        return self._do("brew_upgrade", "upgrade")

    def brew_cleanup(self) -> ActionOutcome:
        return self._do("brew_cleanup", "cleanup")

    def is_tapped(self, name: str) -> bool:
        return name in self.taps

    def tap(self, name: str) -> ActionOutcome:
        out = self._do("tap", name)
        if out.success:
            self.taps.add(name)
        return out

    def is_installed(self, name: str) -> bool:
        return name in self.installed

    def install(self, name: str) -> ActionOutcome:
        out = self._do("install", name)
        if out.success:
            self.installed.add(name)
        return out

    def is_cask_installed(self, name: str) -> bool:
        return name in self.casks

    def install_cask(self, name: str) -> ActionOutcome:
        out = self._do("install_cask", name)
        if out.success:
            self.casks.add(name)
        return out

    def store_app_installed(self, *, app_id: Optional[int] = None, name: Optional[str] = None) -> bool:
        if app_id is None and name is not None:
            app_id = self.store_catalog.get(name)
        return app_id is not None and app_id in self.store_installed

    def search_store_app(self, name: str) -> ActionOutcome:
        self.calls.append(("search_store_app", name))
        if name not in self.store_catalog:
            return ActionOutcome.failed(f"App Store app '{name}' not found", kind="not_found")
        return ActionOutcome.ok(f"'{name}' resolved", value=self.store_catalog[name])

    def install_store_app(self, app_id: int) -> ActionOutcome:
        out = self._do("install_store_app", app_id)
        if out.success:
            self.store_installed.add(app_id)
        return out

    def toolchain_binary_present(self, binary: str) -> bool:
        return binary in self.binaries

    def toolchain_install(self, tool: str, module: str) -> ActionOutcome:
        out = self._do("toolchain_install", module)
        if out.success:
            self.binaries.add(module.split("@")[0].rsplit("/", 1)[-1])
        return out

    def is_cloned(self, dest: str) -> bool:
        return dest in self.clones

    def clone(self, url: str, dest: str) -> ActionOutcome:
        out = self._do("clone", url)
        if out.success:
            self.clones.add(dest)
        return out

    def is_linked(self, source: str, dest: str) -> bool:
        return self.links.get(dest) == source

    def link(self, source: str, dest: str) -> ActionOutcome:
        out = self._do("link", dest)
        if out.success:
            self.links[dest] = source
        return out

    def has_shell_line(self, path: str, line: str, marker: Optional[str] = None) -> bool:
        needle = marker or line
        return any(needle in existing for existing in self.lines.get(path, []))

    def append_shell_line(self, path: str, line: str) -> ActionOutcome:
        out = self._do("append_shell_line", line)
        if out.success:
            self.lines.setdefault(path, []).append(line)
        return out

    def current_shell(self) -> str:
        return self.shell

    def set_default_shell(self, shell_path: str) -> ActionOutcome:
        out = self._do("set_default_shell", shell_path)
        if out.success:
            self.shell = shell_path
        return out

    def acted(self, op: str) -> List[Any]:
        return [key for name, key in self.calls if name == op]


@pytest.fixture
def fake_actions() -> FakeActions:
    return FakeActions()


@pytest.fixture
def make_profile(tmp_path: Path):
    """Build a Profile from a raw mapping rooted at tmp_path."""

    def _make(raw: Dict[str, Any]) -> Profile:
        data: Dict[str, Any] = {"prerequisites": {"homebrew": False}}
        data.update(raw)
        validate(data)
        return Profile(raw=data, home=str(tmp_path), brew_prefix="/opt/homebrew")

    return _make


@pytest.fixture
def run_log() -> RunLogger:
    return RunLogger(FailureLog())


@pytest.fixture(autouse=True)
def clean_logging() -> Generator[None, None, None]:
    """Drop handlers installed by configure_logging() between tests."""

    yield
    reset_logging()
