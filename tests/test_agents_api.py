"""
Feature: Gestion des agents Vapi
  En tant qu'utilisateur authentifié
  Je veux enregistrer, consulter, modifier et supprimer mes agents Vapi
  Sans que la clé API stockée ne soit jamais renvoyée
"""

import httpx

from vapi_hub.api.dependencies import get_vapi_client_factory
from vapi_hub.main import app
from vapi_hub.models.agent import AgentConfig
from vapi_hub.services.vapi_client import VapiClient


def test_create_agent_scenario(test_client, session):
    response = test_client.post(
        "/agents/",
        json={"name": "Support Bot", "external_agent_id": "agent_1", "api_key": "sk-1"},
    )

    assert response.status_code == 201
    created = response.json()
    assert created["is_active"] is True
    assert created["api_key"] == "***"
    assert created["owner_id"] == "user-1"

    read = test_client.get(f"/agents/{created['id']}").json()
    assert read["api_key"] == "***"
    assert read["name"] == "Support Bot"

    # La clé réelle est bien stockée
    assert session.get(AgentConfig, created["id"]).api_key == "sk-1"


def test_list_agents_is_redacted_and_scoped_to_user(test_client, agent_payload, current_user):
    test_client.post("/agents/", json=agent_payload)
    current_user["id"] = "user-2"
    test_client.post("/agents/", json={**agent_payload, "name": "Other Bot", "api_key": "sk-2"})
    current_user["id"] = "user-1"

    agents = test_client.get("/agents/").json()

    assert [a["name"] for a in agents] == ["Support Bot"]
    assert all(a["api_key"] == "***" for a in agents)
    assert "sk-1" not in test_client.get("/agents/").text


def test_create_agent_requires_name_external_id_and_key(test_client, session, agent_payload):
    for field in ("name", "external_agent_id", "api_key"):
        missing = {key: value for key, value in agent_payload.items() if key != field}
        assert test_client.post("/agents/", json=missing).status_code == 422

        empty = {**agent_payload, field: ""}
        response = test_client.post("/agents/", json=empty)
        assert response.status_code == 422
        assert response.json()["detail"][0]["loc"][-1] == field

    assert session.query(AgentConfig).count() == 0


def test_get_missing_agent_returns_null(test_client):
    response = test_client.get("/agents/999")

    assert response.status_code == 200
    assert response.json() is None


def test_get_agent_of_another_user_is_forbidden(test_client, agent_payload, current_user):
    agent_id = test_client.post("/agents/", json=agent_payload).json()["id"]
    current_user["id"] = "user-2"

    response = test_client.get(f"/agents/{agent_id}")

    assert response.status_code == 403


def test_partial_update_leaves_other_fields_unchanged(test_client, agent_payload):
    before = test_client.post("/agents/", json=agent_payload).json()

    response = test_client.put(f"/agents/{before['id']}", json={"description": "Night shift", "is_active": False})

    assert response.status_code == 200
    after = test_client.get(f"/agents/{before['id']}").json()
    assert after["description"] == "Night shift"
    assert after["is_active"] is False
    for key in ("name", "external_agent_id", "phone_number", "api_key", "owner_id"):
        assert after[key] == before[key]


def test_update_ignores_explicit_null_for_required_columns(test_client, agent_payload):
    agent_id = test_client.post("/agents/", json=agent_payload).json()["id"]

    response = test_client.put(f"/agents/{agent_id}", json={"name": None, "is_active": None})

    assert response.status_code == 200
    assert response.json()["name"] == "Support Bot"
    assert response.json()["is_active"] is True


def test_update_missing_agent_returns_null(test_client):
    response = test_client.put("/agents/999", json={"name": "Ghost"})

    assert response.status_code == 200
    assert response.json() is None


def test_update_agent_of_another_user_is_forbidden(test_client, agent_payload, current_user, session):
    agent_id = test_client.post("/agents/", json=agent_payload).json()["id"]
    current_user["id"] = "user-2"

    response = test_client.put(f"/agents/{agent_id}", json={"name": "Hijacked"})

    assert response.status_code == 403
    assert session.get(AgentConfig, agent_id).name == "Support Bot"


def test_delete_agent_is_idempotent(test_client, agent_payload, session):
    agent_id = test_client.post("/agents/", json=agent_payload).json()["id"]

    assert test_client.delete(f"/agents/{agent_id}").json() == {"success": True}
    assert test_client.delete(f"/agents/{agent_id}").json() == {"success": True}
    assert test_client.delete("/agents/12345").status_code == 200
    assert session.query(AgentConfig).count() == 0


def test_delete_agent_of_another_user_is_forbidden(test_client, agent_payload, current_user, session):
    agent_id = test_client.post("/agents/", json=agent_payload).json()["id"]
    current_user["id"] = "user-2"

    assert test_client.delete(f"/agents/{agent_id}").status_code == 403
    assert session.query(AgentConfig).count() == 1


def test_create_with_verification_checks_external_agent(test_client, agent_payload, client_factory):
    response = test_client.post(
        "/agents/?verify=true",
        json={**agent_payload, "external_agent_id": "agent_demo_001"},
    )

    assert response.status_code == 201
    assert client_factory.api_keys == ["sk-1"]


def test_failed_verification_persists_nothing(test_client, agent_payload, session):
    def handler(request):
        return httpx.Response(404, json={"message": "Couldn't find agent"})

    transport = httpx.MockTransport(handler)
    app.dependency_overrides[get_vapi_client_factory] = lambda: (
        lambda api_key: VapiClient(api_key, base_url="https://vapi.test", transport=transport)
    )

    response = test_client.post("/agents/?verify=true", json=agent_payload)

    assert response.status_code == 502
    assert response.json()["detail"] == "Couldn't find agent"
    assert response.json()["upstream_status"] == 404
    assert session.query(AgentConfig).count() == 0


def test_verification_does_not_follow_path_traversal_in_external_id(test_client, agent_payload, session):
    def handler(request):
        if request.url.raw_path == b"/assistant":
            return httpx.Response(200, json=[{"id": "asst_1"}])
        return httpx.Response(404, json={"message": "Couldn't find agent"})

    transport = httpx.MockTransport(handler)
    app.dependency_overrides[get_vapi_client_factory] = lambda: (
        lambda api_key: VapiClient(api_key, base_url="https://vapi.test", transport=transport)
    )

    response = test_client.post("/agents/?verify=true", json={**agent_payload, "external_agent_id": "../assistant"})

    assert response.status_code == 502
    assert session.query(AgentConfig).count() == 0
