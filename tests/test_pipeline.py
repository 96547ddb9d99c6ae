"""End-to-end pipeline tests with every external stage mocked."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from msub.core.errors import EmptyAudioError, ProcessError
from msub.core.models import JobStatus, StyleConfig, VideoJob, VideoMetadata
from msub.core.pipeline import process_video
from msub.subtitles.burn import BurnResult
from msub.subtitles.srt import save_srt

META = VideoMetadata(width=1920, height=1080, container_format="mp4")


def _fake_extract(video, output, config):
    Path(output).write_bytes(b"\0" * 1024)
    return Path(output)


def _fake_transcribe(segments):
    def run(audio, config, timeout=None):
        srt = Path(audio).with_name(Path(audio).name + ".srt")
        save_srt(segments, srt)
        return list(segments), srt

    return run


def _client(available=True):
    client = MagicMock()
    client.is_available.return_value = available
    client.translate_text.side_effect = lambda text, lang: f"{lang}:{text}"
    client.config.pause_every = 0
    return client


@pytest.fixture
def job(tmp_path):
    video = tmp_path / "clip.mp4"
    video.write_bytes(b"fake video")
    return VideoJob(source_path=video, original_name="clip.mp4", style=StyleConfig(languages=["zh-tw", "en"]))


@pytest.fixture
def stages(base_segments):
    """Patch every external stage; burn-in succeeds by default."""

    def fake_burn(video, tracks, style, metadata, output, config, temp):
        for track in tracks:
            temp.track(track.source_path.with_suffix(".ass"))
        Path(output).write_bytes(b"burned")
        return BurnResult(output_path=Path(output))

    with patch("msub.core.pipeline.probe_video", return_value=META) as probe, patch(
        "msub.core.pipeline.extract_audio", side_effect=_fake_extract
    ), patch("msub.core.pipeline.transcribe", side_effect=_fake_transcribe(base_segments)), patch(
        "msub.core.pipeline.burn_in", side_effect=fake_burn
    ) as burn, patch(
        "msub.core.pipeline.send_notifications", return_value=0
    ) as notify:
        yield {"probe": probe, "burn": burn, "notify": notify}


def test_happy_path(job, config, stages):
    events = []
    log = []
    result = process_video(job, config, on_event=events.append, client=_client(), completion_log=log)

    assert result.success
    assert result.languages == ["zh-tw", "en"]
    assert result.subtitle_count == 3
    assert result.output_path == config.output_dir / "clip_subtitled.mp4"
    assert job.status == JobStatus.COMPLETED
    assert log[0].original_file == "clip.mp4"
    stages["notify"].assert_called_once()

    progress = [e.progress for e in events]
    assert progress == sorted(progress)
    assert progress[-1] == 1.0
    assert events[-1].step == "completed"
    steps = {e.step for e in events}
    assert {"probing", "extracting_audio", "transcribing", "merging_subtitles"} <= steps
    assert any(step.startswith("translating_") for step in steps)


def test_service_down_keeps_base_track(job, config, stages):
    result = process_video(job, config, client=_client(available=False))

    assert result.success
    assert result.languages == ["zh-tw"]
    assert any("en" in w for w in result.warnings)
    assert job.status == JobStatus.COMPLETED


def test_burn_in_fallback_still_completes(job, config, stages):
    stages["burn"].side_effect = lambda video, tracks, style, metadata, output, config, temp: BurnResult(
        output_path=Path(output), fallback=True, error="No such filter: 'ass'"
    )
    result = process_video(job, config, client=_client())

    assert result.success
    assert result.fallback
    assert job.status == JobStatus.COMPLETED


def test_stage_failure_marks_job_failed(job, config, stages):
    events = []
    with patch("msub.core.pipeline.extract_audio", side_effect=EmptyAudioError("0 bytes")):
        result = process_video(job, config, on_event=events.append, client=_client())

    assert not result.success
    assert "0 bytes" in result.error
    assert job.status == JobStatus.FAILED
    assert events[-1].step == "failed"
    stages["notify"].assert_not_called()


def test_temp_files_cleaned_once_on_success(job, config, stages):
    unlinked = []
    original_unlink = Path.unlink

    def tracking_unlink(self, missing_ok=False):
        unlinked.append(self)
        original_unlink(self, missing_ok=missing_ok)

    with patch.object(Path, "unlink", tracking_unlink):
        process_video(job, config, client=_client())

    names = [p.name for p in unlinked]
    assert names.count("audio.wav") == 1
    assert names.count("audio.wav.srt") == 1
    assert names.count("subtitles_en.srt") == 1
    assert names.count("subtitles_en.ass") == 1
    assert not any(config.temp_dir.rglob("*.wav"))


def test_temp_files_cleaned_on_failure(job, config, stages):
    stages["burn"].side_effect = ProcessError(["ffmpeg"], 1, "copy failed")
    result = process_video(job, config, client=_client())

    assert not result.success
    assert not any(p.is_file() for p in config.temp_dir.rglob("*"))


@pytest.mark.parametrize("stage", ["transcribe", "generate_tracks"])
def test_temp_files_unlinked_once_when_stage_raises(job, config, stages, stage):
    unlinked = []
    original_unlink = Path.unlink

    def tracking_unlink(self, missing_ok=False):
        unlinked.append(self)
        original_unlink(self, missing_ok=missing_ok)

    with patch(f"msub.core.pipeline.{stage}", side_effect=ProcessError([stage], 1, "crashed")), patch.object(
        Path, "unlink", tracking_unlink
    ):
        result = process_video(job, config, client=_client())

    assert not result.success
    assert job.status == JobStatus.FAILED
    names = [p.name for p in unlinked]
    assert names.count("audio.wav") == 1
    assert names.count("audio.wav.srt") == 1
    assert not any(p.is_file() for p in config.temp_dir.rglob("*"))
    stages["burn"].assert_not_called()


def test_keep_temp_files(job, config, stages):
    config.keep_temp_files = True
    process_video(job, config, client=_client())
    assert any(config.temp_dir.rglob("audio.wav"))


def test_notification_failure_does_not_fail_job(job, config, stages):
    stages["notify"].side_effect = RuntimeError("network down")
    result = process_video(job, config, client=_client())
    assert result.success
