import os
import tempfile
import shutil
from pathlib import Path
from unittest.mock import patch
import pytest

from vc_tool.config import ENV_KEYS, Settings
from vc_tool.logging_config import reset_logging

# Test data and fixtures

@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path)

@pytest.fixture
def video_file(temp_dir):
    """A placeholder input file; ffmpeg and ffprobe are always mocked."""
    return create_mock_video_file(temp_dir / "video.mp4")

@pytest.fixture
def settings():
    """Settings with a fixed encoder so no GPU detection runs."""
    return Settings(video_encoder="libx264")

@pytest.fixture
def ffmpeg_installed():
    """Pretend ffmpeg is on PATH."""
    with patch("shutil.which", side_effect=lambda name: f"/usr/bin/{name}") as mock_which:
        yield mock_which

@pytest.fixture
def mock_ffmpeg_success():
    """Mock successful ffmpeg subprocess calls."""
    with patch('subprocess.run') as mock_run:
        mock_run.return_value.returncode = 0
        mock_run.return_value.stdout = ''
        mock_run.return_value.stderr = ''
        yield mock_run

@pytest.fixture(autouse=True)
def setup_test_env(temp_dir):
    """Isolate tests from the user's vc environment and config file."""
    original_env = os.environ.copy()
    for env_var in ENV_KEYS.values():
        os.environ.pop(env_var, None)
    os.environ['VC_CONFIG'] = str(temp_dir / "missing-config.yaml")
    reset_logging()
    yield
    reset_logging()
    os.environ.clear()
    os.environ.update(original_env)

# Helper functions for tests

def create_mock_video_file(file_path: Path) -> Path:
    """Create a minimal file that looks like an MP4."""
    file_path.write_bytes(b'\x00\x00\x00\x20ftypmp42' + b'\x00' * 1000)
    return file_path
