"""Tests for shared data models."""

from pathlib import Path

import pytest

from msub.core.models import (
    CompletedRecord,
    JobResult,
    JobStatus,
    Segment,
    StyleConfig,
    SubtitleStyle,
    VideoJob,
)


class TestSubtitleStyle:
    def test_defaults(self):
        style = SubtitleStyle()
        assert (style.font, style.size, style.color, style.position, style.margin) == (
            "Arial",
            20,
            "#FFFFFF",
            "top",
            30,
        )

    def test_invalid_position_rejected(self):
        with pytest.raises(ValueError, match="position"):
            SubtitleStyle(position="middle")

    def test_non_positive_size_rejected(self):
        with pytest.raises(ValueError):
            SubtitleStyle(size=0)

    def test_non_hex_color_rejected(self):
        with pytest.raises(ValueError, match="color"):
            SubtitleStyle(color="red")

    def test_from_dict_fills_missing_fields(self):
        style = SubtitleStyle.from_dict({"size": "28", "position": "bottom"})
        assert style.size == 28
        assert style.position == "bottom"
        assert style.font == "Arial"


class TestStyleConfig:
    def test_from_upload_document(self):
        style = StyleConfig.from_dict(
            {
                "languages": ["zh-tw", "en"],
                "configs": {"en": {"font": "Roboto", "color": "#00FF00", "position": "bottom"}},
                "order": {"top": ["zh-tw"], "bottom": ["en"]},
            }
        )
        assert style.languages == ["zh-tw", "en"]
        assert style.style_for("en").font == "Roboto"
        assert style.order_bottom == ["en"]

    def test_flat_order_list_is_top_order(self):
        style = StyleConfig.from_dict({"order": ["en", "zh-tw"]})
        assert style.order_top == ["en", "zh-tw"]
        assert style.order_bottom == []

    def test_default_languages_used_when_missing(self):
        assert StyleConfig.from_dict({}, ["zh-tw", "zh-cn"]).languages == ["zh-tw", "zh-cn"]

    def test_style_for_unconfigured_language(self):
        style = StyleConfig()
        assert style.style_for("zh-tw").font == "Noto Sans TC"
        assert style.style_for("fr") == SubtitleStyle()

    def test_invalid_position_in_document_raises(self):
        with pytest.raises(ValueError):
            StyleConfig.from_dict({"configs": {"en": {"position": "left"}}})

    def test_invalid_color_in_document_raises(self):
        with pytest.raises(ValueError, match="color"):
            StyleConfig.from_dict({"configs": {"en": {"color": "red"}}})


class TestVideoJob:
    def test_terminal_transition_happens_once(self):
        job = VideoJob(source_path=Path("a.mp4"), original_name="a.mp4")
        job.finish(JobResult(success=False, error="boom"))
        job.finish(JobResult(success=True))
        assert job.status == JobStatus.FAILED
        assert job.error == "boom"

    def test_success_sets_full_progress(self):
        job = VideoJob(source_path=Path("a.mp4"), original_name="a.mp4")
        job.finish(JobResult(success=True))
        assert job.status == JobStatus.COMPLETED
        assert job.progress == 1.0

    def test_ids_are_unique(self):
        a = VideoJob(source_path=Path("a.mp4"), original_name="a.mp4")
        b = VideoJob(source_path=Path("a.mp4"), original_name="a.mp4")
        assert a.id != b.id


def test_segment_is_immutable():
    seg = Segment(start=0.0, end=1.0, text="hi")
    with pytest.raises(AttributeError):
        seg.text = "bye"


def test_completed_record_to_dict():
    record = CompletedRecord(
        original_file="a.mp4",
        output_file="a_subtitled.mp4",
        languages=["zh-tw"],
        duration=12.3456,
        success=True,
    )
    data = record.to_dict()
    assert data["originalFile"] == "a.mp4"
    assert data["newFile"] == "a_subtitled.mp4"
    assert data["duration"] == 12.35
