import pytest
from fastapi.testclient import TestClient

from dataflow.gateway.main import create_app
from engine.config.loader import EditorConfig


@pytest.fixture
def client():
    with TestClient(create_app(EditorConfig())) as client:
        yield client


def add_node(client, label):
    response = client.post("/nodes", json={"label": label})
    assert response.status_code == 201
    return response.json()


def test_health(client):
    assert client.get("/").json()["status"] == "running"
    health = client.get("/health").json()
    assert health["nodes"] == 0 and health["edges"] == 0


def test_initial_status(client):
    body = client.get("/status").json()
    assert body["status"] == "TooFewNodes"
    assert body["message"] == "Invalid: Need at least 2 nodes"


def test_build_valid_dag(client):
    a = add_node(client, "a")["node"]
    created = add_node(client, "b")
    assert created["status"]["status"] == "Disconnected"
    b = created["node"]

    response = client.post("/edges", json={"source": a["id"], "target": b["id"]})
    assert response.status_code == 201
    assert response.json()["status"]["status"] == "Valid"

    graph = client.get("/graph").json()
    assert len(graph["nodes"]) == 2
    assert graph["edges"][0]["source"] == a["id"]


def test_empty_label_rejected(client):
    assert client.post("/nodes", json={"label": ""}).status_code == 400
    assert client.post("/nodes", json={}).status_code == 400
    assert client.get("/graph").json()["nodes"] == []


def test_self_loop_rejected(client):
    a = add_node(client, "a")["node"]
    response = client.post("/edges", json={"source": a["id"], "target": a["id"]})
    assert response.status_code == 409
    assert response.json()["detail"]["reason"] == "self-loop"
    assert client.get("/graph").json()["edges"] == []


def test_cycle_reported(client):
    a = add_node(client, "a")["node"]
    b = add_node(client, "b")["node"]
    client.post("/edges", json={"source": a["id"], "target": b["id"]})
    response = client.post("/edges", json={"source": b["id"], "target": a["id"]})
    status = response.json()["status"]
    assert status["status"] == "CycleDetected"
    assert status["cycle"][0] == status["cycle"][-1]


def test_select_and_delete(client):
    a = add_node(client, "a")["node"]
    b = add_node(client, "b")["node"]
    edge = client.post("/edges", json={"source": a["id"], "target": b["id"]}).json()["edge"]

    response = client.patch(f"/edges/{edge['id']}", json={"selected": True})
    assert response.json()["selected"] is True

    deleted = client.post("/selection/delete").json()
    assert deleted["removed_edges"] == [edge["id"]]
    assert deleted["status"]["status"] == "Disconnected"


def test_move_node(client):
    a = add_node(client, "a")["node"]
    response = client.patch(f"/nodes/{a['id']}", json={"position": {"x": 12, "y": 34}})
    assert response.json()["position"] == {"x": 12.0, "y": 34.0}


def test_unknown_entities_404(client):
    assert client.patch("/nodes/nope", json={"selected": True}).status_code == 404
    assert client.patch("/edges/nope", json={"selected": True}).status_code == 404


def test_delete_key(client):
    a = add_node(client, "a")["node"]
    client.patch(f"/nodes/{a['id']}", json={"selected": True})

    assert client.post("/keys", json={"key": "Enter"}).json()["deleted"] is False
    response = client.post("/keys", json={"key": "Delete"}).json()
    assert response["deleted"] is True
    assert client.get("/graph").json()["nodes"] == []


def test_reconnecting_existing_pair_returns_200(client):
    a = add_node(client, "a")["node"]
    b = add_node(client, "b")["node"]
    pair = {"source": a["id"], "target": b["id"]}

    created = client.post("/edges", json=pair)
    repeated = client.post("/edges", json=pair)

    assert created.status_code == 201
    assert repeated.status_code == 200
    assert repeated.json()["edge"]["id"] == created.json()["edge"]["id"]
    assert len(client.get("/graph").json()["edges"]) == 1
