"""Tests for job workspace and output path utilities."""

from pathlib import Path

from msub.utils.paths import (
    create_workspace,
    is_video_file,
    output_path_for,
    slugify,
    subtitle_path,
    workspace_paths,
)


class TestSlugify:
    def test_basic(self):
        assert slugify("Hello World") == "hello-world"

    def test_cjk_kept(self):
        assert slugify("新聞 第1集!") == "新聞-第1集"

    def test_collapses_dashes(self):
        assert slugify("a---b   c") == "a-b-c"

    def test_truncates_long_strings(self):
        assert len(slugify("a" * 200)) <= 80


class TestCreateWorkspace:
    def test_nested_structure(self, tmp_path):
        """Workspace is <base>/<slug>/<timestamp>_<job id>/."""
        ws = create_workspace("My Video", "abc123", base_dir=tmp_path)
        assert ws.is_dir()
        assert ws.parent.name == "my-video"
        assert ws.parent.parent == tmp_path
        assert ws.name.endswith("_abc123")
        assert len(ws.name) == len("YYYYMMDD_HHMMSS_abc123")

    def test_jobs_never_share_a_directory(self, tmp_path):
        a = create_workspace("clip", "job1", base_dir=tmp_path)
        b = create_workspace("clip", "job2", base_dir=tmp_path)
        assert a != b
        assert a.parent == b.parent

    def test_untitled_fallback(self, tmp_path):
        assert create_workspace("!!!", "x", base_dir=tmp_path).parent.name == "untitled"


def test_output_path(tmp_path):
    out = output_path_for(Path("/uploads/holiday.MOV"), "mov", tmp_path / "videos_out")
    assert out == tmp_path / "videos_out" / "holiday_subtitled.mov"
    assert out.parent.is_dir()


def test_workspace_paths(tmp_path):
    paths = workspace_paths(tmp_path)
    assert paths["audio"] == tmp_path / "audio.wav"
    assert paths["transcription_srt"] == tmp_path / "audio.wav.srt"


def test_subtitle_path(tmp_path):
    assert subtitle_path(tmp_path, "zh-cn") == tmp_path / "subtitles_zh-cn.srt"
    assert subtitle_path(tmp_path, "en", "ass") == tmp_path / "subtitles_en.ass"


def test_is_video_file():
    assert is_video_file(Path("a.MP4"))
    assert not is_video_file(Path("a.srt"))
