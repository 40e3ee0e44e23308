import sys

import pytest

from gazer_node.localstorage import LocalStorage, home_directory


def test_directory_created_under_home(tmp_path):
    storage = LocalStorage("gazer_node", tmp_path)
    assert storage.path == tmp_path / ".gazer_node"
    assert storage.path.is_dir()


def test_write_read_round_trip(tmp_path):
    storage = LocalStorage("prog", tmp_path)
    storage.write("data.bin", b"\x00\x01abc")
    assert storage.read("data.bin") == b"\x00\x01abc"


def test_write_replaces_content(tmp_path):
    storage = LocalStorage("prog", tmp_path)
    storage.write("f", b"long content here")
    storage.write("f", b"short")
    assert storage.read("f") == b"short"


def test_exists(tmp_path):
    storage = LocalStorage("prog", tmp_path)
    assert storage.exists("missing") is False
    storage.write("present", b"x")
    assert storage.exists("present") is True


def test_read_missing_raises(tmp_path):
    storage = LocalStorage("prog", tmp_path)
    with pytest.raises(FileNotFoundError):
        storage.read("missing")


def test_home_directory_from_env_linux(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    monkeypatch.setenv("HOME", "/tmp/someone")
    assert home_directory() == "/tmp/someone"


def test_home_directory_fallback_linux(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    monkeypatch.setenv("HOME", "")
    assert home_directory() == "/home/default"


def test_home_directory_fallback_darwin(monkeypatch):
    monkeypatch.setattr(sys, "platform", "darwin")
    monkeypatch.delenv("HOME", raising=False)
    assert home_directory() == "/"


def test_home_directory_windows(monkeypatch):
    monkeypatch.setattr(sys, "platform", "win32")
    monkeypatch.delenv("USERPROFILE", raising=False)
    assert home_directory() == "C:\\Users\\Default"
    monkeypatch.setenv("USERPROFILE", "D:\\Profiles\\someone")
    assert home_directory() == "D:\\Profiles\\someone"