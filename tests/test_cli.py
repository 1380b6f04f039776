"""
Tests for the kokoro-tts command-line entry point.
"""
import io
from pathlib import Path
from types import SimpleNamespace

import pytest
from unittest.mock import MagicMock, patch

from kokoro_tts import cli
from kokoro_tts.tts.errors import EngineLoadError, PhonemizationError

ENV_VARS = (
    "KOKORO_MODEL_PATH",
    "KOKORO_VOICE_PATH",
    "TTS_LANGUAGE",
    "TTS_SPEED",
    "KOKORO_MAX_CHUNK_TOKENS",
    "KOKORO_TRIM_SAMPLES",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep load_dotenv away from any .env in the developer's checkout
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def mock_tts():
    tts = MagicMock()
    tts.generate.return_value = b"RIFF....WAVE"
    tts.generate_and_save.side_effect = lambda text, path, lang, speed: path
    with patch("kokoro_tts.tts.kokoro.KokoroTTS.from_config", return_value=tts) as from_config:
        tts.from_config = from_config
        yield tts


def test_no_arguments_prints_help(capsys):
    assert cli.main([]) == 0
    assert "usage: kokoro-tts" in capsys.readouterr().out


@pytest.mark.parametrize("flag", ["-h", "--help"])
def test_help_flag_exits_with_zero(capsys, flag):
    with pytest.raises(SystemExit) as excinfo:
        cli.main([flag])
    assert excinfo.value.code == 0
    assert "--pipe" in capsys.readouterr().out


def test_unknown_flag_exits_with_one(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["hello", "--bogus"])
    assert excinfo.value.code == 1
    assert "unrecognized arguments" in capsys.readouterr().err


def test_bad_speed_exits_with_one():
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["hello", "--speed", "fast"])
    assert excinfo.value.code == 1


def test_saves_to_default_output(mock_tts):
    assert cli.main(["Hello world"]) == 0
    mock_tts.generate_and_save.assert_called_once_with("Hello world", Path("output.wav"), "en-us", 1.0)
    mock_tts.generate.assert_not_called()


def test_flags_override_config(mock_tts, monkeypatch):
    monkeypatch.setenv("TTS_LANGUAGE", "fr-fr")
    argv = ["Hi", "-o", "hi.wav", "-l", "en-gb", "-s", "1.5", "-m", "m.onnx", "-v", "v.npy"]
    assert cli.main(argv) == 0

    config = mock_tts.from_config.call_args[0][0]
    assert config.language == "en-gb"
    assert config.speed == 1.5
    assert config.model_path == Path("m.onnx")
    assert config.voice_path == Path("v.npy")
    mock_tts.generate_and_save.assert_called_once_with("Hi", Path("hi.wav"), "en-gb", 1.5)


def test_environment_supplies_defaults(mock_tts, monkeypatch):
    monkeypatch.setenv("TTS_LANGUAGE", "en-gb")
    monkeypatch.setenv("KOKORO_MODEL_PATH", "/opt/kokoro.onnx")
    assert cli.main(["Hi"]) == 0

    config = mock_tts.from_config.call_args[0][0]
    assert config.language == "en-gb"
    assert config.model_path == Path("/opt/kokoro.onnx")


def test_pipe_writes_wav_to_stdout(mock_tts):
    with patch("kokoro_tts.cli._write_stdout") as write_stdout:
        assert cli.main(["Hello", "--pipe"]) == 0
    write_stdout.assert_called_once_with(b"RIFF....WAVE")
    mock_tts.generate_and_save.assert_not_called()


def test_closed_pipe_is_success(mock_tts):
    with patch("kokoro_tts.cli._write_stdout", side_effect=BrokenPipeError):
        assert cli.main(["Hello", "-p"]) == 0


@pytest.mark.parametrize("error", [EngineLoadError("ONNX model not found: x"), PhonemizationError("espeak missing")])
def test_tts_errors_exit_with_one(error):
    with patch("kokoro_tts.tts.kokoro.KokoroTTS.from_config", side_effect=error):
        assert cli.main(["Hello"]) == 1


def test_unexpected_errors_exit_with_one(mock_tts):
    mock_tts.generate_and_save.side_effect = RuntimeError("boom")
    assert cli.main(["Hello"]) == 1


def test_write_stdout_uses_binary_buffer(monkeypatch):
    buffer = io.BytesIO()
    monkeypatch.setattr(cli.sys, "stdout", SimpleNamespace(buffer=buffer))
    cli._write_stdout(b"RIFF")
    assert buffer.getvalue() == b"RIFF"


def test_unwritable_log_directory_does_not_abort(mock_tts, monkeypatch, tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    monkeypatch.setenv("LOG_JSONL_PATH", str(blocker / "kokoro_tts.jsonl"))

    assert cli.main(["Hello"]) == 0
    mock_tts.generate_and_save.assert_called_once()
