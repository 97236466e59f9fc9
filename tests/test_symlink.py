from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path

import pytest

from macstrap.actions import SystemActions
from macstrap.errors import PrerequisiteMissing
from macstrap.lib.symlink import backup_and_link, backup_path, is_linked

NOW = datetime(2025, 3, 1, 12, 30, 45)


@pytest.fixture
def dotfiles(tmp_path: Path) -> Path:
    d = tmp_path / "dotfiles"
    (d / "zsh").mkdir(parents=True)
    (d / "zsh" / ".zshrc").write_text("# managed\n", encoding="utf-8")
    (d / ".config" / "nvim").mkdir(parents=True)
    return d


def test_existing_file_is_backed_up_then_linked(tmp_path: Path, dotfiles: Path) -> None:
    home = tmp_path / "home"
    home.mkdir()
    dest = home / ".zshrc"
    dest.write_text("my precious config\n", encoding="utf-8")
    source = dotfiles / "zsh" / ".zshrc"

    r = backup_and_link(source, dest, now=NOW)

    assert r.backup == home / ".zshrc.backup.20250301123045"
    assert r.backup.read_text(encoding="utf-8") == "my precious config\n"
    assert dest.is_symlink()
    assert os.readlink(dest) == str(source)
    assert dest.read_text(encoding="utf-8") == "# managed\n"


def test_existing_directory_is_backed_up(tmp_path: Path, dotfiles: Path) -> None:
    dest = tmp_path / "home" / ".config" / "nvim"
    dest.mkdir(parents=True)
    (dest / "init.lua").write_text("vim.opt.number = true\n", encoding="utf-8")

    r = backup_and_link(dotfiles / ".config" / "nvim", dest, now=NOW)

    assert r.backup is not None
    assert (r.backup / "init.lua").read_text(encoding="utf-8") == "vim.opt.number = true\n"
    assert is_linked(dotfiles / ".config" / "nvim", dest)


def test_missing_parent_directories_are_created(tmp_path: Path, dotfiles: Path) -> None:
    dest = tmp_path / "home" / "deep" / "er" / ".zshrc"

    r = backup_and_link(dotfiles / "zsh" / ".zshrc", dest)

    assert r.backup is None
    assert dest.is_symlink()


def test_existing_symlink_is_replaced_without_backup(tmp_path: Path, dotfiles: Path) -> None:
    old_target = tmp_path / "old.zshrc"
    old_target.write_text("old\n", encoding="utf-8")
    dest = tmp_path / ".zshrc"
    dest.symlink_to(old_target)

    r = backup_and_link(dotfiles / "zsh" / ".zshrc", dest, now=NOW)

    assert r.replaced_link is True
    assert r.backup is None
    assert os.readlink(dest) == str(dotfiles / "zsh" / ".zshrc")
    assert old_target.read_text(encoding="utf-8") == "old\n"
    assert not list(tmp_path.glob(".zshrc.backup.*"))


def test_backup_name_collision_gets_counter(tmp_path: Path) -> None:
    dest = tmp_path / ".zshrc"
    (tmp_path / ".zshrc.backup.20250301123045").write_text("first\n", encoding="utf-8")
    (tmp_path / ".zshrc.backup.20250301123045.1").write_text("second\n", encoding="utf-8")

    assert backup_path(dest, now=NOW) == tmp_path / ".zshrc.backup.20250301123045.2"


def test_two_backups_in_the_same_second_keep_both(tmp_path: Path, dotfiles: Path) -> None:
    dest = tmp_path / ".zshrc"
    source = dotfiles / "zsh" / ".zshrc"

    dest.write_text("one\n", encoding="utf-8")
    first = backup_and_link(source, dest, now=NOW)
    dest.unlink()
    dest.write_text("two\n", encoding="utf-8")
    second = backup_and_link(source, dest, now=NOW)

    assert first.backup != second.backup
    assert first.backup.read_text(encoding="utf-8") == "one\n"
    assert second.backup.read_text(encoding="utf-8") == "two\n"


def test_missing_source_refused_and_destination_untouched(tmp_path: Path) -> None:
    dest = tmp_path / ".zshrc"
    dest.write_text("keep me\n", encoding="utf-8")

    with pytest.raises(PrerequisiteMissing):
        backup_and_link(tmp_path / "nope", dest)

    assert not dest.is_symlink()
    assert dest.read_text(encoding="utf-8") == "keep me\n"


def test_dry_run_changes_nothing(tmp_path: Path, dotfiles: Path) -> None:
    dest = tmp_path / "home" / ".zshrc"
    dest.parent.mkdir()
    dest.write_text("original\n", encoding="utf-8")

    r = backup_and_link(dotfiles / "zsh" / ".zshrc", dest, dry_run=True, now=NOW)

    assert r.backup is not None
    assert not r.backup.exists()
    assert not dest.is_symlink()
    assert dest.read_text(encoding="utf-8") == "original\n"


def test_is_linked_requires_exact_target(tmp_path: Path, dotfiles: Path) -> None:
    dest = tmp_path / "nvim"
    dest.symlink_to(dotfiles / ".config" / "nvim")

    assert is_linked(dotfiles / ".config" / "nvim", dest)
    assert not is_linked(dotfiles / "zsh", dest)
    assert not is_linked(dotfiles / ".config" / "nvim", tmp_path / "missing")


def test_link_adapter_reports_failure_instead_of_raising(tmp_path: Path, dotfiles: Path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")

    outcome = SystemActions().link(str(dotfiles / "zsh" / ".zshrc"), str(blocker / ".zshrc"))

    assert outcome.success is False
    assert outcome.kind == "action_failed"
    assert "Could not link" in outcome.detail


def test_link_adapter_mentions_backup(tmp_path: Path, dotfiles: Path) -> None:
    dest = tmp_path / ".zshrc"
    dest.write_text("x\n", encoding="utf-8")

    outcome = SystemActions().link(str(dotfiles / "zsh" / ".zshrc"), str(dest))

    assert outcome.success
    assert "backup:" in outcome.detail
