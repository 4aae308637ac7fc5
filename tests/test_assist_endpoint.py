"""Integration tests for the POST /api/assist endpoint."""
import pytest
from fastapi.testclient import TestClient
from unittest.mock import Mock
import json
import sys
import os

# Add backend to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))


SOLUTION = {
    "type": "solution",
    "problemStatement": "Find two numbers that add up to a target.",
    "approach": "Hash map of seen values.",
    "codeSnippet": "def two_sum(nums, target): ...",
    "timeComplexity": "O(n)",
    "spaceComplexity": "O(n)",
    "dryRun": "[2,7,11,15], 9 -> [0, 1]",
    "testCases": [
        {"input": "[2,7,11,15], 9", "output": "[0, 1]"},
        {"input": "[3,2,4], 6", "output": "[1, 2]"},
    ],
}


@pytest.fixture
def mock_services():
    """Wire a real orchestrator to mocked store and model clients."""
    import main
    from services.assistant_orchestrator import AssistOrchestrator
    from services.llm_client import LLMResponse

    store = Mock()
    store.fetch_recent.return_value = []

    llm = Mock()
    llm.complete.return_value = LLMResponse(
        text=json.dumps(SOLUTION),
        tokens_input=100,
        tokens_output=200,
        latency_ms=500,
        model_used="llama-3.3-70b-versatile"
    )

    main.orchestrator = AssistOrchestrator(store, llm, interaction_logger=Mock())

    yield {'store': store, 'llm': llm}

    main.orchestrator = None


@pytest.fixture
def client(mock_services):
    """Create a test client; startup hooks are not run."""
    from main import app
    return TestClient(app, raise_server_exceptions=False)


def body(**overrides):
    payload = {"userId": "u1", "sessionId": "s1", "input": "Given an array of integers, find two numbers that add up to a target"}
    payload.update(overrides)
    return payload


def test_solution_response(client, mock_services):
    response = client.post("/api/assist", json=body())

    assert response.status_code == 200
    data = response.json()
    assert data["type"] == "solution"
    assert data["data"] == {k: v for k, v in SOLUTION.items() if k != "type"}


def test_turn_recorded_with_raw_output(client, mock_services):
    client.post("/api/assist", json=body())

    turn = mock_services['store'].append.call_args.args[0]
    assert turn.user_id == "u1"
    assert turn.session_id == "s1"
    assert turn.assistant_raw == json.dumps(SOLUTION)


def test_plain_answer_response(client, mock_services):
    from services.llm_client import LLMResponse
    mock_services['llm'].complete.return_value = LLMResponse(
        text='{"type": "response", "answer": "It is O(n)."}',
        tokens_input=10, tokens_output=5, latency_ms=50, model_used="m"
    )

    response = client.post("/api/assist", json=body(input="can you explain the time complexity again?"))

    assert response.status_code == 200
    assert response.json() == {"type": "response", "text": "It is O(n)."}


def test_snake_case_request(client, mock_services):
    response = client.post("/api/assist", json={"user_id": "u1", "session_id": "s1", "input": "hi"})
    assert response.status_code == 200


def test_empty_input_rejected(client, mock_services):
    response = client.post("/api/assist", json=body(input=""))

    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "invalid_input"
    assert [d["field"] for d in data["details"]] == ["input"]
    mock_services['store'].fetch_recent.assert_not_called()
    mock_services['llm'].complete.assert_not_called()


def test_all_missing_fields_listed(client, mock_services):
    response = client.post("/api/assist", json={})

    assert response.status_code == 400
    fields = {d["field"] for d in response.json()["details"]}
    assert fields == {"userId", "sessionId", "input"}


def test_malformed_json_rejected(client, mock_services):
    response = client.post(
        "/api/assist",
        content=b"{not json",
        headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json()["details"] == [{"field": "body", "message": "must be valid JSON"}]


def test_history_read_failure(client, mock_services):
    from services.errors import StoreUnavailableError
    mock_services['store'].fetch_recent.side_effect = StoreUnavailableError(
        StoreUnavailableError.READ, "password authentication failed"
    )

    response = client.post("/api/assist", json=body())

    assert response.status_code == 500
    data = response.json()
    assert data["error"] == "history_unavailable"
    assert "password" not in data["message"]
    mock_services['llm'].complete.assert_not_called()


def test_history_write_failure_still_answers(client, mock_services):
    from services.errors import StoreUnavailableError
    mock_services['store'].append.side_effect = StoreUnavailableError(
        StoreUnavailableError.WRITE, "insert failed"
    )

    response = client.post("/api/assist", json=body())

    assert response.status_code == 200
    assert response.json()["type"] == "solution"
    mock_services['store'].append.assert_called_once()


def test_upstream_failure(client, mock_services):
    from services.llm_client import LLMClientError, LLMError
    mock_services['llm'].complete.side_effect = LLMClientError(
        LLMError(code="AUTHENTICATION_ERROR", message="Authentication failed.", details={})
    )

    response = client.post("/api/assist", json=body())

    assert response.status_code == 500
    assert response.json()["error"] == "upstream_unavailable"
    mock_services['store'].append.assert_not_called()


def test_unexpected_error(client, mock_services):
    mock_services['store'].fetch_recent.side_effect = KeyError("boom")

    response = client.post("/api/assist", json=body())

    assert response.status_code == 500
    assert response.json() == {"error": "internal_error", "message": "Internal Server Error"}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
