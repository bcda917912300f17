from pathlib import Path

import pytest

from thpconverter.core import SourceDescriptor
from thpconverter.core import media_probe
from thpconverter.core.errors import InvalidVideoError


@pytest.fixture
def source(tmp_path):
    path = tmp_path / "clip.mp4"
    path.write_bytes(b"\x00")
    return path


def _fake_parser(infos):
    def parse(filename):
        if isinstance(infos, Exception):
            raise infos
        return infos

    return lambda: parse


def test_probe_reports_streams_and_size(monkeypatch, source):
    monkeypatch.setattr(
        media_probe,
        "_resolve_parse_infos",
        _fake_parser({"video_found": True, "audio_found": True, "video_size": [1920, 1080]}),
    )
    assert media_probe.probe_source(source) == SourceDescriptor(True, True, 1920, 1080)


def test_probe_without_video_has_no_size(monkeypatch, source):
    monkeypatch.setattr(media_probe, "_resolve_parse_infos", _fake_parser({"video_found": False, "audio_found": True}))
    descriptor = media_probe.probe_source(source)
    assert not descriptor.has_video_stream
    assert descriptor.has_audio_stream
    assert (descriptor.width, descriptor.height) == (0, 0)


def test_probe_missing_file_raises_before_ffmpeg(monkeypatch, tmp_path):
    def unexpected():
        raise AssertionError("ffmpeg should not be consulted")

    monkeypatch.setattr(media_probe, "_resolve_parse_infos", unexpected)
    with pytest.raises(InvalidVideoError, match="File not found"):
        media_probe.probe_source(tmp_path / "missing.mp4")


def test_unreadable_file_raises_invalid_video(monkeypatch, source):
    monkeypatch.setattr(media_probe, "_resolve_parse_infos", _fake_parser(IOError("could not find duration")))
    with pytest.raises(InvalidVideoError, match="Could not read metadata"):
        media_probe.probe_source(source)


def test_video_without_size_raises_invalid_video(monkeypatch, source):
    monkeypatch.setattr(media_probe, "_resolve_parse_infos", _fake_parser({"video_found": True, "audio_found": True}))
    with pytest.raises(InvalidVideoError, match="Could not read video size"):
        media_probe.probe_source(source)
