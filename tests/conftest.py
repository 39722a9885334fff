"""
Shared test configuration and fixtures.
"""

import sys
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Add src to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

# Load environment from project root .env file
project_env_file = project_root / ".env"
if project_env_file.exists():
    load_dotenv(project_env_file)


@pytest.fixture(autouse=True)
def fresh_settings():
    """Make every test read settings from its own environment."""
    from claude_wire.config import reset_settings

    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def message_payload():
    """A complete /v1/messages response body."""
    return {
        "id": "msg_01XFDUDYJgAACzvnptvVoYEL",
        "type": "message",
        "role": "assistant",
        "content": [{"type": "text", "text": "Hello!"}],
        "model": "claude-3-haiku-20240307",
        "stop_reason": "end_turn",
        "stop_sequence": None,
        "usage": {"input_tokens": 12, "output_tokens": 6},
    }


@pytest.fixture
def stream_payloads():
    """The event payloads of a short streamed reply, in arrival order."""
    return [
        {
            "type": "message_start",
            "message": {
                "id": "msg_stream",
                "type": "message",
                "role": "assistant",
                "content": [],
                "model": "claude-3-haiku-20240307",
                "stop_reason": None,
                "stop_sequence": None,
                "usage": {"input_tokens": 10, "output_tokens": 1},
            },
        },
        {"type": "content_block_start", "index": 0, "content_block": {"type": "text", "text": ""}},
        {"type": "content_block_delta", "index": 0, "delta": {"type": "text_delta", "text": "Hi"}},
        {"type": "content_block_stop", "index": 0},
        {"type": "message_stop"},
    ]
