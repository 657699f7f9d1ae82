from fractalwave.helpers import find_executable_in_app_dir, read_stylesheet


def test_direct_lookup(tmp_path):
    tool_dir = tmp_path / "ffmpeg" / "bin"
    tool_dir.mkdir(parents=True)
    exe = tool_dir / "ffmpeg.exe"
    exe.write_bytes(b"")
    assert find_executable_in_app_dir("ffmpeg/bin", "ffmpeg.exe", tmp_path) == exe


def test_recursive_lookup(tmp_path):
    nested = tmp_path / "yt-dlp" / "nested" / "deeper"
    nested.mkdir(parents=True)
    exe = nested / "yt-dlp.exe"
    exe.write_bytes(b"")
    assert find_executable_in_app_dir("yt-dlp", "yt-dlp.exe", tmp_path) == exe


def test_direct_preferred_over_nested(tmp_path):
    tool_dir = tmp_path / "tools"
    (tool_dir / "sub").mkdir(parents=True)
    (tool_dir / "sub" / "tool.exe").write_bytes(b"")
    direct = tool_dir / "tool.exe"
    direct.write_bytes(b"")
    assert find_executable_in_app_dir("tools", "tool.exe", tmp_path) == direct


def test_missing_directory(tmp_path):
    assert find_executable_in_app_dir("absent", "tool.exe", tmp_path) is None


def test_missing_executable(tmp_path):
    (tmp_path / "tools").mkdir()
    (tmp_path / "tools" / "other.exe").write_bytes(b"")
    assert find_executable_in_app_dir("tools", "tool.exe", tmp_path) is None


def test_directory_with_exe_name_is_not_returned(tmp_path):
    (tmp_path / "tools" / "sub" / "tool.exe").mkdir(parents=True)
    result = find_executable_in_app_dir("tools", "tool.exe", tmp_path)
    assert result == tmp_path / "tools" / "tool.exe" or result is None


def test_read_stylesheet(tmp_path):
    sheet = tmp_path / "player.qss"
    content = "QFrame#player { background: #3a3a3a; }\n"
    sheet.write_text(content, encoding="utf-8")
    assert read_stylesheet(sheet) == content


def test_read_missing_stylesheet(tmp_path):
    assert read_stylesheet(tmp_path / "missing.qss") == ""