import subprocess
from pathlib import Path

import pytest
from PIL import Image

from thpconverter.core import Stage, TargetResolution
from thpconverter.core.errors import ExternalToolError
from thpconverter.core.transcoder import FFmpegTranscoder


def test_audio_command_resamples_to_wav():
    cmd = FFmpegTranscoder("ffmpeg").audio_command(Path("in.mp4"), Path("audio.wav"), 32000)
    assert cmd == [
        "ffmpeg", "-y", "-i", "in.mp4", "-f", "wav", "-ar", "32000", "-movflags", "+faststart", "audio.wav",
    ]


def test_frames_command_scales_at_max_quality():
    cmd = FFmpegTranscoder("ffmpeg").frames_command(
        Path("in.mp4"), Path("jpegs/%05d.jpeg"), TargetResolution(672, 384), "29.97"
    )
    assert cmd[cmd.index("-q:v") + 1] == "1"
    assert cmd[cmd.index("-r") + 1] == "29.97"
    assert cmd[cmd.index("-vf") + 1] == "scale=672:384"
    assert cmd[-1] == str(Path("jpegs/%05d.jpeg"))


def test_extract_frames_counts_written_jpegs(monkeypatch, tmp_path, caplog):
    frames_dir = tmp_path / "jpegs"
    frames_dir.mkdir()

    def fake_run(cmd, **kwargs):
        assert kwargs["check"] is True
        for index in (1, 2):
            Image.new("RGB", (640, 480)).save(frames_dir / f"{index:05d}.jpeg")
        return subprocess.CompletedProcess(cmd, 0)

    monkeypatch.setattr(subprocess, "run", fake_run)

    count = FFmpegTranscoder("ffmpeg").extract_frames(
        Path("in.mp4"), frames_dir / "%05d.jpeg", TargetResolution(640, 480), "29.97"
    )

    assert count == 2
    assert "expected" not in caplog.text


def test_extract_frames_warns_on_size_mismatch(monkeypatch, tmp_path, caplog):
    frames_dir = tmp_path / "jpegs"
    frames_dir.mkdir()

    def fake_run(cmd, **kwargs):
        Image.new("RGB", (320, 240)).save(frames_dir / "00001.jpeg")
        return subprocess.CompletedProcess(cmd, 0)

    monkeypatch.setattr(subprocess, "run", fake_run)

    FFmpegTranscoder("ffmpeg").extract_frames(Path("in.mp4"), frames_dir / "%05d.jpeg", TargetResolution(640, 480), "29.97")

    assert "expected 640x480" in caplog.text


def test_ffmpeg_failure_becomes_external_tool_error(monkeypatch, tmp_path):
    def fake_run(cmd, **kwargs):
        raise subprocess.CalledProcessError(1, cmd, stderr=b"header\nin.mp4: Invalid data found\n")

    monkeypatch.setattr(subprocess, "run", fake_run)

    with pytest.raises(ExternalToolError) as excinfo:
        FFmpegTranscoder("ffmpeg").extract_audio(Path("in.mp4"), tmp_path / "audio.wav", 32000)

    assert excinfo.value.stage is Stage.AUDIO
    assert "in.mp4: Invalid data found" in str(excinfo.value)


def test_missing_ffmpeg_binary_becomes_external_tool_error(monkeypatch, tmp_path):
    def fake_run(cmd, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", cmd[0])

    monkeypatch.setattr(subprocess, "run", fake_run)

    with pytest.raises(ExternalToolError) as excinfo:
        FFmpegTranscoder("/nope/ffmpeg").extract_frames(
            Path("in.mp4"), tmp_path / "%05d.jpeg", TargetResolution(16, 16), "29.97"
        )
    assert excinfo.value.stage is Stage.FRAMES
