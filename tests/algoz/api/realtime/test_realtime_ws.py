from __future__ import annotations

from algoz.api.realtime import router as realtime_router
from algoz.core.dependencies import get_realtime_hub
from algoz.services.realtime_hub import INVALID_MESSAGE, UNSUPPORTED_MESSAGE, ConnectionHub
from fastapi import FastAPI
from fastapi.testclient import TestClient


class _FakeAnalysis:
    def debug(self, problem_statement: str, code: str, language: str) -> str:
        return f"## Debugging {language}\n{problem_statement}"

    def explain(self, problem_statement: str, solution_code: str, language: str) -> str:
        return "explained"

    def record_debug(self, **_kwargs) -> None:  # noqa: ANN003
        return None

    def record_explain(self, **_kwargs) -> None:  # noqa: ANN003
        return None


def _create_app(hub: ConnectionHub) -> FastAPI:
    app = FastAPI()
    app.include_router(realtime_router)
    app.dependency_overrides[get_realtime_hub] = lambda: hub
    return app


def test_debug_round_trip_over_websocket():
    hub = ConnectionHub(analysis=_FakeAnalysis())  # type: ignore[arg-type]
    client = TestClient(_create_app(hub))

    with client.websocket_connect("/ws") as ws:
        ws.send_json(
            {
                "type": "debug_request",
                "problemStatement": "A+B",
                "code": "print(a+b)",
                "language": "python",
            }
        )
        assert ws.receive_json() == {"type": "debug_response", "response": "## Debugging python\nA+B"}
        assert hub.connection_count == 1

    assert hub.connection_count == 0


def test_bad_payloads_get_errors_without_closing_the_socket():
    hub = ConnectionHub(analysis=_FakeAnalysis())  # type: ignore[arg-type]
    client = TestClient(_create_app(hub))

    with client.websocket_connect("/ws") as ws:
        ws.send_text("definitely not json")
        assert ws.receive_json() == {"type": "error", "message": INVALID_MESSAGE}

        ws.send_json({"type": "launch_rockets"})
        assert ws.receive_json() == {"type": "error", "message": UNSUPPORTED_MESSAGE}

        ws.send_json(
            {"type": "explain_request", "problemStatement": "p", "solutionCode": "s", "language": "go"}
        )
        assert ws.receive_json() == {"type": "explain_response", "response": "explained"}


def test_non_string_type_gets_an_error_and_the_socket_stays_open():
    hub = ConnectionHub(analysis=_FakeAnalysis())  # type: ignore[arg-type]
    client = TestClient(_create_app(hub))

    with client.websocket_connect("/ws") as ws:
        ws.send_json({"type": []})
        assert ws.receive_json() == {"type": "error", "message": INVALID_MESSAGE}

        ws.send_json({"type": {"a": 1}})
        assert ws.receive_json() == {"type": "error", "message": INVALID_MESSAGE}

        ws.send_json(
            {"type": "explain_request", "problemStatement": "p", "solutionCode": "s", "language": "go"}
        )
        assert ws.receive_json() == {"type": "explain_response", "response": "explained"}
        assert hub.connection_count == 1
