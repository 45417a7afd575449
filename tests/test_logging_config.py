"""Tests for loguru sink configuration."""

import subprocess
from unittest.mock import patch

import pytest
from loguru import logger

from vc_tool.errors import ExternalFailure
from vc_tool.logging_config import configure_logging, reset_logging
from vc_tool.video_processor import VideoProcessor


def read_log(path):
    # Removing the sinks closes the file so everything is flushed
    reset_logging()
    return path.read_text()


@pytest.mark.unit
class TestTerminalSinks:
    def test_default_run_is_silent(self, capsys):
        configure_logging()
        logger.info("quiet info")
        logger.error("quiet error")
        captured = capsys.readouterr()
        assert "quiet info" not in captured.err
        assert "quiet error" not in captured.err

    def test_verbose_adds_stderr_sink(self, capsys):
        configure_logging(verbose=True)
        logger.debug("debug detail")
        logger.info("visible info")
        captured = capsys.readouterr()
        assert "visible info" in captured.err
        assert "debug detail" not in captured.err

    def test_second_call_is_ignored(self, capsys):
        configure_logging()
        configure_logging(verbose=True)
        logger.info("still quiet")
        assert "still quiet" not in capsys.readouterr().err


@pytest.mark.unit
class TestLogFile:
    def test_ffmpeg_command_logged_at_debug(
        self, temp_dir, video_file, settings, ffmpeg_installed, mock_ffmpeg_success
    ):
        log_path = temp_dir / "vc.log"
        configure_logging(log_file=str(log_path))

        VideoProcessor(settings).dispatch("mute", "-", str(video_file))

        lines = read_log(log_path).splitlines()
        command_lines = [line for line in lines if "ffmpeg command:" in line]
        assert len(command_lines) == 1
        assert "DEBUG" in command_lines[0]
        assert "ffmpeg -hide_banner -n -i" in command_lines[0]
        assert "-an" in command_lines[0]

    def test_ffmpeg_failure_logged_with_stderr(
        self, temp_dir, video_file, settings, ffmpeg_installed
    ):
        log_path = temp_dir / "vc.log"
        configure_logging(log_file=str(log_path))
        error = subprocess.CalledProcessError(1, ["ffmpeg"], stderr="Invalid data found when processing input")

        with patch("subprocess.run", side_effect=error):
            with pytest.raises(ExternalFailure):
                VideoProcessor(settings).dispatch("mute", "-", str(video_file))

        content = read_log(log_path)
        assert "ERROR" in content
        assert "ffmpeg exited with status 1" in content
        assert "Invalid data found when processing input" in content

    def test_file_sink_does_not_echo_to_terminal(
        self, temp_dir, video_file, settings, ffmpeg_installed, mock_ffmpeg_success, capsys
    ):
        configure_logging(log_file=str(temp_dir / "vc.log"))

        VideoProcessor(settings).dispatch("mute", "-", str(video_file))

        assert "ffmpeg command:" not in capsys.readouterr().err
