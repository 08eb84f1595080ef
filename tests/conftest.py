import json
import os
from pathlib import Path

import pytest

TEST_CONFIG = Path(__file__).parent / "config.test.yaml"

# The app reads its config at import time (CORS origins), so this must be set first.
os.environ.setdefault("MOCKSTREAM_CONFIG", str(TEST_CONFIG))

from fastapi.testclient import TestClient  # noqa: E402

from mockstream.main import app  # noqa: E402


@pytest.fixture
def client():
    # Entering the context runs the lifespan, which reloads config and the store.
    with TestClient(app) as c:
        yield c


def parse_sse(body: str) -> tuple[list[dict], bool]:
    """Split an SSE body into decoded events and whether it ended with [DONE]."""
    frames = [frame for frame in body.split("\n\n") if frame]
    assert all(frame.startswith("data: ") for frame in frames), frames
    payloads = [frame[len("data: "):] for frame in frames]
    done = bool(payloads) and payloads[-1] == "[DONE]"
    if done:
        payloads = payloads[:-1]
    return [json.loads(p) for p in payloads], done


def delta_text(events: list[dict]) -> str:
    return "".join(e["delta"] for e in events if e["type"] == "text-delta")
