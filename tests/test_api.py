"""HTTP adapter tests using FastAPI's TestClient."""

import json
import math

import pytest
from fastapi.testclient import TestClient

from typegraph import GraphApp, Settings, create_app


@pytest.fixture
def client(registry):
    settings = Settings(ui=True, cors_origins=[])
    return TestClient(create_app(registry, settings))


class TestGraphEndpoint:
    def test_get_with_json_query(self, client):
        response = client.get("/graph", params={"graph": json.dumps(["viewer", "id"])})
        assert response.status_code == 200
        assert response.json() == {"data": {"viewer": {"id": "123"}}}

    def test_get_with_percent_encoded_query(self, client):
        encoded = "%5B%22viewer%22%2C%22name%22%5D"
        response = client.get("/graph", params={"graph": encoded})
        assert response.status_code == 200
        assert response.json() == {"data": {"viewer": {"name": "Sam Jones"}}}

    def test_post_body(self, client):
        response = client.post("/graph", json=["greeting", {"name": "Ada"}])
        assert response.status_code == 200
        assert response.json() == {"data": {"greeting": "hello Ada"}}

    def test_post_body_holding_encoded_string(self, client):
        response = client.post("/graph", json=json.dumps(["viewer", "id"]))
        assert response.status_code == 200
        assert response.json() == {"data": {"viewer": {"id": "123"}}}

    def test_compose_over_http(self, client):
        response = client.post("/graph", json=["::compose", ["viewer", "id"], "fauxCall"])
        assert response.json() == {
            "data": [
                {"viewer": {"id": "123"}},
                {"fauxCall": {"thing1": "x", "thing2": "x"}},
            ]
        }

    def test_structural_error_is_200_envelope(self, client):
        response = client.post("/graph", json=["nope"])
        assert response.status_code == 200
        assert response.json() == {
            "errors": [["processingError", 'The query name "nope" is not allowed.']]
        }

    def test_partial_failure_is_reported(self, make_registry):
        async def broken(info):
            raise RuntimeError("upstream unavailable")

        registry = make_registry(broken={"type": "String", "resolve": broken})
        client = TestClient(create_app(registry, Settings(cors_origins=[])))
        response = client.post("/graph", json=["::compose", ["viewer", "id"], "broken"])
        assert response.status_code == 200
        assert response.json() == {
            "data": [{"viewer": {"id": "123"}}, {"broken": None}],
            "errors": [["broken", "upstream unavailable"]],
        }

    def test_resolvers_see_transport_request(self, make_registry):
        def user_agent(info):
            return info.context.request.headers.get("x-client", "")

        registry = make_registry(client={"type": "String", "resolve": user_agent})
        client = TestClient(create_app(registry, Settings(cors_origins=[])))
        response = client.post("/graph", json=["client"], headers={"X-Client": "tests"})
        assert response.json() == {"data": {"client": "tests"}}

    @pytest.mark.parametrize("method", ["put", "patch", "delete", "options", "trace"])
    def test_other_methods_rejected(self, client, method):
        response = client.request(method.upper(), "/graph")
        assert response.status_code == 405
        assert response.headers["allow"] == "GET, POST"
        assert "error" in response.json()

    def test_head_rejected(self, client):
        response = client.head("/graph")
        assert response.status_code == 405
        assert response.headers["allow"] == "GET, POST"

    def test_unserializable_output_is_500_json(self, make_registry):
        registry = make_registry(ratio={"type": "Number", "resolve": lambda info: math.nan})
        client = TestClient(create_app(registry, Settings(cors_origins=[])))
        response = client.post("/graph", json=["ratio"])
        assert response.status_code == 500
        assert "error" in response.json()

    def test_missing_graph_parameter(self, client):
        response = client.get("/graph")
        assert response.status_code == 500
        assert "error" in response.json()

    def test_invalid_json_query(self, client):
        response = client.get("/graph", params={"graph": "[not json"})
        assert response.status_code == 500
        assert "error" in response.json()

    def test_empty_body(self, client):
        response = client.post("/graph", content=b"")
        assert response.status_code == 500

    def test_invalid_json_body(self, client):
        response = client.post("/graph", content=b"{viewer", headers={"Content-Type": "application/json"})
        assert response.status_code == 500


class TestAuxiliaryEndpoints:
    def test_spec_description(self, client):
        response = client.get("/graph/__spec")
        assert response.status_code == 200
        body = response.json()
        assert body["queries"]["greeting"] == {"type": "String!", "expect": {"name": "String!"}}
        assert body["types"]["Person"]["friends"] == {"type": ["Person!"]}

    def test_explorer_page(self, client):
        response = client.get("/graph/ui")
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "TYPEGRAPH_CONFIG" in response.text
        assert '"specUrl": "/graph/__spec"' in response.text

    def test_explorer_disabled_by_default(self, registry):
        client = TestClient(create_app(registry, Settings(cors_origins=[])))
        assert client.get("/graph/ui").status_code == 404

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_status(self, registry):
        graph_app = GraphApp(registry, Settings(path="api/graph/", cors_origins=[]))
        client = TestClient(graph_app.app)
        assert client.get("/__status").json() == {
            "types": 1,
            "queries": 4,
            "path": "/api/graph",
            "ui": False,
        }
        assert graph_app.app.state.graph_app is graph_app

    def test_custom_path(self, registry):
        client = TestClient(create_app(registry, Settings(path="/api/graph", cors_origins=[])))
        response = client.post("/api/graph", json=["viewer", "id"])
        assert response.json() == {"data": {"viewer": {"id": "123"}}}
        assert client.post("/graph", json=["viewer", "id"]).status_code == 404

    def test_explorer_skipped_when_not_bundled(self, registry, tmp_path, monkeypatch):
        monkeypatch.setattr("typegraph.playground.EXPLORER_PATH", tmp_path)
        client = TestClient(create_app(registry, Settings(ui=True, cors_origins=[])))
        assert client.get("/graph/ui").status_code == 404
        assert client.post("/graph", json=["viewer", "id"]).status_code == 200
