import pytest

from toolloop.core.safety import Safety


def test_resolve_joins_workspace(tmp_path):
    safety = Safety(tmp_path)
    assert safety.resolve("a/b.txt") == tmp_path / "a" / "b.txt"


def test_check_command_blocklist_is_substring_match(tmp_path):
    safety = Safety(tmp_path)
    safety.check_command("ls -la")
    safety.check_command("rm -rf ./build")
    with pytest.raises(PermissionError, match="command not allowed"):
        safety.check_command("echo 1; sudo reboot")
    with pytest.raises(PermissionError):
        safety.check_command("rm -rf /tmp/x")


def test_check_write_path(tmp_path):
    safety = Safety(tmp_path)
    safety.check_write_path("sub/dir/file.txt")
    for bad in ("", "..", "/abs", "\\abs", "D:/x", "a/../b"):
        with pytest.raises(PermissionError, match="invalid path"):
            safety.check_write_path(bad)


def test_check_read_path_allows_absolute(tmp_path):
    safety = Safety(tmp_path)
    safety.check_read_path("/etc/hostname")
    with pytest.raises(PermissionError, match="path traversal detected"):
        safety.check_read_path("../x")
