import subprocess
from pathlib import Path

import pytest

from thpconverter.core import Stage
from thpconverter.core.encoder import THPConvEncoder
from thpconverter.core.errors import ExternalToolError


def test_command_passes_glob_audio_rate_and_destination():
    encoder = THPConvEncoder(Path("THPConv") / "THPConv.exe")
    cmd = encoder.command(Path("jpegs/*.jpeg"), Path("audio.wav"), "29.97", Path("DOKAPON.THP"))
    assert cmd == [
        str(Path("THPConv") / "THPConv.exe"),
        "-j", str(Path("jpegs/*.jpeg")),
        "-s", "audio.wav",
        "-r", "29.97",
        "-d", "DOKAPON.THP",
    ]


def test_encode_success_is_output_existence(monkeypatch, tmp_path, caplog):
    output = tmp_path / "out.thp"

    def fake_run(cmd, **kwargs):
        output.write_bytes(b"THP\x00")
        return subprocess.CompletedProcess(cmd, 3, stdout=b"", stderr=b"")

    monkeypatch.setattr(subprocess, "run", fake_run)

    assert THPConvEncoder(Path("THPConv")).encode(tmp_path / "*.jpeg", tmp_path / "a.wav", "29.97", output)
    assert "exited with status 3" in caplog.text


def test_encode_without_output_returns_false(monkeypatch, tmp_path):
    monkeypatch.setattr(subprocess, "run", lambda cmd, **kwargs: subprocess.CompletedProcess(cmd, 0, b"", b""))

    assert not THPConvEncoder(Path("THPConv")).encode(
        tmp_path / "*.jpeg", tmp_path / "a.wav", "29.97", tmp_path / "out.thp"
    )


def test_missing_binary_raises_external_tool_error(tmp_path):
    encoder = THPConvEncoder(tmp_path / "missing" / "THPConv.exe")
    with pytest.raises(ExternalToolError) as excinfo:
        encoder.encode(tmp_path / "*.jpeg", tmp_path / "a.wav", "29.97", tmp_path / "out.thp")
    assert excinfo.value.stage is Stage.ENCODE
    assert excinfo.value.tool == "THPConv"
