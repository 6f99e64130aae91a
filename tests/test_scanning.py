from pathlib import Path

import pytest
from werkzeug.exceptions import BadRequest, NotFound

from conftest import T0, write_save
from servemap.scanning import (
    find_latest_save,
    list_save_names,
    save_name_for,
    save_pattern,
    validate_name,
)


@pytest.mark.parametrize("name", ["a/b", "a\\b", "a.b", "..", "../etc", ""])
def test_invalid_names_rejected_before_scanning(name, save_dir, monkeypatch):
    def _no_glob(*a, **kw):
        raise AssertionError("filesystem scanned for an invalid name")

    monkeypatch.setattr(Path, "glob", _no_glob)
    with pytest.raises(BadRequest) as exc:
        find_latest_save(name, save_dir)
    assert exc.value.description == "Invalid characters in name"


def test_valid_name_passes():
    validate_name("Noobville")
    validate_name("Noob ville-2")


def test_latest_by_mtime(save_dir):
    write_save(save_dir, "Noobville_autosave_0.sav", mtime_ns=T0)
    newest = write_save(save_dir, "Noobville_autosave_1.sav", mtime_ns=T0 + 10**9)
    write_save(save_dir, "Noobville_autosave_2.sav", mtime_ns=T0 - 10**9)
    write_save(save_dir, "Other_autosave_0.sav", mtime_ns=T0 + 10**10)

    assert find_latest_save("Noobville", save_dir) == newest


def test_tie_goes_to_smallest_path(save_dir):
    write_save(save_dir, "Tie_b.sav", mtime_ns=T0)
    a = write_save(save_dir, "Tie_a.sav", mtime_ns=T0)
    write_save(save_dir, "Tie_c.sav", mtime_ns=T0)

    assert find_latest_save("Tie", save_dir) == a


def test_no_match_reports_pattern(save_dir):
    write_save(save_dir, "Noobville_autosave_0.sav")
    write_save(save_dir, "Ghost_autosave_0.txt")

    with pytest.raises(NotFound) as exc:
        find_latest_save("Ghost", save_dir)
    pattern = save_pattern(save_dir, "Ghost")
    assert pattern == str(save_dir / "Ghost*.sav")
    assert exc.value.description == f"No matching files found for pattern: {pattern}"


def test_match_is_case_sensitive(save_dir):
    write_save(save_dir, "Noobville_autosave_0.sav")
    with pytest.raises(NotFound):
        find_latest_save("noobville", save_dir)


def test_does_not_recurse(save_dir):
    top = write_save(save_dir, "Deep_0.sav", mtime_ns=T0)
    write_save(save_dir, "sub/Deep_1.sav", mtime_ns=T0 + 10**9)

    assert find_latest_save("Deep", save_dir) == top


def test_skips_directories_and_broken_entries(save_dir):
    good = write_save(save_dir, "Mixed_0.sav", mtime_ns=T0)
    (save_dir / "Mixed_dir.sav").mkdir()
    (save_dir / "Mixed_gone.sav").symlink_to(save_dir / "missing.sav")

    assert find_latest_save("Mixed", save_dir) == good


def test_skips_symlinks_leaving_save_dir(save_dir, tmp_path):
    inside = write_save(save_dir, "Escape_0.sav", mtime_ns=T0)
    outside = write_save(tmp_path, "secret.sav", mtime_ns=T0 + 10**10)
    (save_dir / "Escape_1.sav").symlink_to(outside)

    assert find_latest_save("Escape", save_dir) == inside


def test_catalog_dedups_names(save_dir):
    write_save(save_dir, "Foo_1.sav")
    write_save(save_dir, "Foo_2.sav")
    write_save(save_dir, "Bar.sav")
    write_save(save_dir, "notes.txt")
    write_save(save_dir, "_orphan.sav")

    assert list_save_names(save_dir) == {"Foo", "Bar"}


def test_catalog_empty_dir(save_dir):
    assert list_save_names(save_dir) == set()


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("Noobville_autosave_0.sav", "Noobville"),
        ("Bar.sav", "Bar"),
        ("A_B_C.sav", "A"),
        ("_x.sav", ""),
    ],
)
def test_save_name_for(filename, expected):
    assert save_name_for(filename) == expected


@pytest.mark.parametrize("message", ["boom", "Invalid pattern: '**' can only be an entire path component"])
def test_glob_error_is_bad_request(save_dir, monkeypatch, message):
    def _bad_glob(self, pattern):
        raise ValueError(message)

    monkeypatch.setattr(Path, "glob", _bad_glob)
    with pytest.raises(BadRequest) as exc:
        find_latest_save("X", save_dir)
    assert exc.value.description.startswith("Invalid pattern: ")
    assert exc.value.description.count("Invalid pattern:") == 1


def test_catalog_skips_unservable_names(save_dir):
    write_save(save_dir, "My.World_autosave_0.sav")
    write_save(save_dir, "Fine_autosave_0.sav")

    assert list_save_names(save_dir) == {"Fine"}
