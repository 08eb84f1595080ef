import pytest
from pydantic import ValidationError

from mockstream import config as config_module
from mockstream.config import MockConfig, get_config, load_config, reload_config
from mockstream.engine.emitter import NAMESPACED, PLAIN


@pytest.fixture(autouse=True)
def restore_config():
    yield
    load_config()


def write(tmp_path, text: str) -> str:
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_defaults_for_empty_file(tmp_path):
    config = load_config(write(tmp_path, ""))
    assert config.collections == []
    assert config.stream.chunk_delay_ms == 20
    assert config.stream.max_chunk_length == 60
    assert config.stream.llm == NAMESPACED
    assert config.stream.lorem == PLAIN
    assert config.match_threshold == 0.15
    assert get_config() is config


def test_delay_seconds():
    config = MockConfig(stream={"chunk_delay_ms": 250})
    assert config.stream.delay_seconds == 0.25


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "absent.yaml"))


def test_duplicate_collection_ids(tmp_path):
    path = write(tmp_path, "collections:\n  - id: a\n  - id: a\n")
    with pytest.raises(ValidationError):
        load_config(path)


def test_duplicate_interaction_ids():
    with pytest.raises(ValidationError):
        MockConfig(
            collections=[
                {
                    "id": "c",
                    "interactions": [
                        {"id": "x", "input": "q", "output": "a"},
                        {"id": "x", "input": "q2", "output": "a2"},
                    ],
                }
            ]
        )


def test_blank_output_rejected():
    with pytest.raises(ValidationError):
        MockConfig(collections=[{"id": "c", "interactions": [{"id": "x", "input": "q", "output": " "}]}])


def test_threshold_range():
    with pytest.raises(ValidationError):
        MockConfig(match_threshold=1.5)


def test_reload_rereads_same_path(tmp_path):
    path = write(tmp_path, "stream:\n  chunk_delay_ms: 5\n")
    load_config(path)
    (tmp_path / "config.yaml").write_text("stream:\n  chunk_delay_ms: 9\n", encoding="utf-8")
    assert reload_config().stream.chunk_delay_ms == 9


def test_get_config_before_load(monkeypatch):
    monkeypatch.setattr(config_module, "_config", None)
    with pytest.raises(RuntimeError):
        get_config()
