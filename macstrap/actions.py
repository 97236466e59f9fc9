from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol

from .lib import brew, git, mas, rcfile, shell, symlink, toolchain, xcode
from .results import ActionOutcome

logger = logging.getLogger(__name__)


class ActionRegistry(Protocol):
    """Capability set the planner builds steps from.

    Queries return plain booleans; actions return an ActionOutcome and never
    raise into the caller.
    """

    dry_run: bool

    def xcode_installed(self) -> bool: ...

    def install_xcode(self, *, timeout_s: float, poll_interval_s: float) -> ActionOutcome: ...

    def brew_installed(self) -> bool: ...

    def install_brew(self) -> ActionOutcome: ...

    def brew_update(self) -> ActionOutcome: ...

    def brew_upgrade(self) -> ActionOutcome: ...

    def brew_cleanup(self) -> ActionOutcome: ...

    def is_tapped(self, name: str) -> bool: ...

    def tap(self, name: str) -> ActionOutcome: ...

    def is_installed(self, name: str) -> bool: ...

    def install(self, name: str) -> ActionOutcome: ...

    def is_cask_installed(self, name: str) -> bool: ...

    def install_cask(self, name: str) -> ActionOutcome: ...

    def store_app_installed(self, *, app_id: Optional[int] = None, name: Optional[str] = None) -> bool: ...

    def search_store_app(self, name: str) -> ActionOutcome: ...

    def install_store_app(self, app_id: int) -> ActionOutcome: ...

    def toolchain_binary_present(self, binary: str) -> bool: ...

    def toolchain_install(self, tool: str, module: str) -> ActionOutcome: ...

    def is_cloned(self, dest: str) -> bool: ...

    def clone(self, url: str, dest: str) -> ActionOutcome: ...

    def is_linked(self, source: str, dest: str) -> bool: ...

    def link(self, source: str, dest: str) -> ActionOutcome: ...

    def has_shell_line(self, path: str, line: str, marker: Optional[str] = None) -> bool: ...

    def append_shell_line(self, path: str, line: str) -> ActionOutcome: ...

    def current_shell(self) -> str: ...

    def set_default_shell(self, shell_path: str) -> ActionOutcome: ...


def _query(fn: Callable[[], bool], what: str) -> bool:
    try:
        return bool(fn())
    except Exception as e:
        logger.debug("Query %s failed: %s", what, e)
        return False


def _attempt(fn: Callable[[], object], detail: str) -> ActionOutcome:
    try:
        fn()
    except Exception as e:
        return ActionOutcome.from_exception(e)
    return ActionOutcome.ok(detail)


class SystemActions:
    """ActionRegistry backed by the real macOS command surfaces."""

    def __init__(
        self,
        *,
        dry_run: bool = False,
        brew_prefix: Optional[str] = None,
        home: Optional[str] = None,
        shells_file: str = shell.SHELLS_FILE,
    ) -> None:
        self.dry_run = dry_run
        self.brew_prefix = brew_prefix or brew.default_prefix()
        self.home = home
        self.shells_file = shells_file

    def _done(self, detail: str) -> str:
        return f"would {detail} (dry-run)" if self.dry_run else detail

    # prerequisites

    def xcode_installed(self) -> bool:
        return _query(xcode.cli_tools_installed, "xcode-select")

    def install_xcode(self, *, timeout_s: float, poll_interval_s: float) -> ActionOutcome:
        return _attempt(
            lambda: xcode.install_cli_tools(
                timeout_s=timeout_s, poll_interval_s=poll_interval_s, dry_run=self.dry_run
            ),
            self._done("install Xcode Command Line Tools"),
        )

    def brew_installed(self) -> bool:
        return _query(lambda: brew.is_brew_installed(self.brew_prefix), "brew")

    def install_brew(self) -> ActionOutcome:
        return _attempt(lambda: brew.install_brew(dry_run=self.dry_run), self._done("install Homebrew"))

    # package manager maintenance

    def brew_update(self) -> ActionOutcome:
        return _attempt(
            lambda: brew.update(prefix=self.brew_prefix, dry_run=self.dry_run), self._done("update Homebrew")
        )

    def brew_upgrade(self) -> ActionOutcome:
        return _attempt(
            lambda: brew.upgrade(prefix=self.brew_prefix, dry_run=self.dry_run), self._done("upgrade packages")
        )

    def brew_cleanup(self) -> ActionOutcome:
        return _attempt(
            lambda: brew.cleanup(prefix=self.brew_prefix, dry_run=self.dry_run), self._done("clean up Homebrew")
        )

    def is_tapped(self, name: str) -> bool:
        return _query(lambda: brew.tapped(name, prefix=self.brew_prefix), f"tap {name}")

    def tap(self, name: str) -> ActionOutcome:
        return _attempt(
            lambda: brew.tap(name, prefix=self.brew_prefix, dry_run=self.dry_run), self._done(f"tap {name}")
        )

    # packages

    def is_installed(self, name: str) -> bool:
        return _query(lambda: brew.formula_installed(name, prefix=self.brew_prefix), f"formula {name}")

    def install(self, name: str) -> ActionOutcome:
        return _attempt(
            lambda: brew.install_formula(name, prefix=self.brew_prefix, dry_run=self.dry_run),
            self._done(f"install {name}"),
        )

    def is_cask_installed(self, name: str) -> bool:
        return _query(lambda: brew.cask_installed(name, prefix=self.brew_prefix), f"cask {name}")

    def install_cask(self, name: str) -> ActionOutcome:
        return _attempt(
            lambda: brew.install_cask(name, prefix=self.brew_prefix, dry_run=self.dry_run),
            self._done(f"install cask {name}"),
        )

    # app store

    def store_app_installed(self, *, app_id: Optional[int] = None, name: Optional[str] = None) -> bool:
        return _query(lambda: mas.is_installed(app_id=app_id, name=name), f"mas {app_id or name}")

    def search_store_app(self, name: str) -> ActionOutcome:
        try:
            app_id = mas.search(name)
        except Exception as e:
            return ActionOutcome.from_exception(e)
        return ActionOutcome.ok(f"'{name}' resolved to {app_id}", value=app_id)

    def install_store_app(self, app_id: int) -> ActionOutcome:
        return _attempt(
            lambda: mas.install(app_id, dry_run=self.dry_run), self._done(f"install App Store app {app_id}")
        )

    # secondary toolchain

    def toolchain_binary_present(self, binary: str) -> bool:
        return _query(lambda: toolchain.binary_present(binary, home=self.home), f"binary {binary}")

    def toolchain_install(self, tool: str, module: str) -> ActionOutcome:
        return _attempt(
            lambda: toolchain.install(tool, module, home=self.home, dry_run=self.dry_run),
            self._done(f"{tool} install {module}"),
        )

    # repositories

    def is_cloned(self, dest: str) -> bool:
        return _query(lambda: git.is_cloned(dest), f"clone {dest}")

    def clone(self, url: str, dest: str) -> ActionOutcome:
        try:
            cloned = git.clone(url, dest, dry_run=self.dry_run)
        except Exception as e:
            return ActionOutcome.from_exception(e)
        if not cloned:
            return ActionOutcome.ok(f"{dest} already present")
        return ActionOutcome.ok(self._done(f"clone {url}"))

    # filesystem

    def is_linked(self, source: str, dest: str) -> bool:
        return _query(lambda: symlink.is_linked(source, dest), f"link {dest}")

    def link(self, source: str, dest: str) -> ActionOutcome:
        try:
            r = symlink.backup_and_link(source, dest, dry_run=self.dry_run)
        except Exception as e:
            return ActionOutcome.from_exception(e)
        detail = f"{dest} -> {source}"
        if r.backup is not None:
            detail += f" (backup: {r.backup})"
        return ActionOutcome.ok(self._done(f"link {detail}"), value=r)

    # shell

    def has_shell_line(self, path: str, line: str, marker: Optional[str] = None) -> bool:
        return _query(lambda: rcfile.has_line(path, line, marker=marker), f"line in {path}")

    def append_shell_line(self, path: str, line: str) -> ActionOutcome:
        return _attempt(
            lambda: rcfile.append_line(path, line, dry_run=self.dry_run), self._done(f"append to {path}")
        )

    def current_shell(self) -> str:
        try:
            return shell.current_shell()
        except Exception as e:
            logger.debug("Could not determine current shell: %s", e)
            return ""

    def set_default_shell(self, shell_path: str) -> ActionOutcome:
        return _attempt(
            lambda: shell.change_default(shell_path, shells_file=self.shells_file, dry_run=self.dry_run),
            self._done(f"set default shell to {shell_path}"),
        )
