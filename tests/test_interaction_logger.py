"""Unit tests for InteractionLogger."""
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

import json
import pytest
from pathlib import Path
from services.interaction_logger import InteractionLogger


@pytest.fixture
def temp_log_file(tmp_path):
    """Create a temporary log file path."""
    return str(tmp_path / "test_interactions.jsonl")


@pytest.fixture
def interaction_logger(temp_log_file):
    """Create an InteractionLogger instance with temporary log file."""
    logger = InteractionLogger(log_file_path=temp_log_file)
    yield logger
    logger.close()


def read_entries(path):
    with open(path, 'r') as f:
        return [json.loads(line) for line in f]


def log_sample(logger, **overrides):
    fields = dict(
        user_id="u1",
        session_id="s1",
        response_type="solution",
        classification="solution",
        model_used="llama-3.3-70b-versatile",
        tokens_input=512,
        tokens_output=128,
        latency_ms=687,
        history_turns=2
    )
    fields.update(overrides)
    logger.log_interaction(**fields)


def test_file_created_lazily(interaction_logger, temp_log_file):
    assert not Path(temp_log_file).exists()
    log_sample(interaction_logger)
    assert Path(temp_log_file).exists()


def test_interaction_entry(interaction_logger, temp_log_file):
    log_sample(interaction_logger)

    entry = read_entries(temp_log_file)[0]
    assert entry["event"] == "interaction"
    assert "timestamp" in entry
    assert entry["user_id"] == "u1"
    assert entry["session_id"] == "s1"
    assert entry["response_type"] == "solution"
    assert entry["tokens_input"] == 512
    assert entry["tokens_output"] == 128
    assert entry["latency_ms"] == 687
    assert entry["history_turns"] == 2


def test_persistence_failure_entry(interaction_logger, temp_log_file):
    interaction_logger.log_persistence_failure(
        user_id="u1",
        session_id="s1",
        error_code="history_write_failed",
        detail="insert failed"
    )

    entry = read_entries(temp_log_file)[0]
    assert entry["event"] == "persistence_failure"
    assert entry["error_code"] == "history_write_failed"
    assert entry["detail"] == "insert failed"


def test_entries_in_order(interaction_logger, temp_log_file):
    for i in range(5):
        log_sample(interaction_logger, latency_ms=300 + i)

    entries = read_entries(temp_log_file)
    assert [e["latency_ms"] for e in entries] == [300, 301, 302, 303, 304]


def test_reopens_after_close(interaction_logger, temp_log_file):
    log_sample(interaction_logger)
    interaction_logger.close()
    log_sample(interaction_logger)

    assert len(read_entries(temp_log_file)) == 2


def test_log_directory_creation(tmp_path):
    """Test that log directory is created if it doesn't exist."""
    log_file = tmp_path / "nested" / "dir" / "interactions.jsonl"
    logger = InteractionLogger(log_file_path=str(log_file))

    log_sample(logger)

    assert log_file.exists()
    logger.close()
