from mediator_api.mediation.personality import DEFAULT_PERSONALITY, build_personality_prompt
from mediator_api.services.mediator_settings_service import MediatorSettingsService

from conftest import auth_headers

ALICE = auth_headers("alice")


def test_defaults_when_nothing_stored(db):
    personality = MediatorSettingsService(db).get_personality("alice")

    assert personality == DEFAULT_PERSONALITY
    assert personality is not DEFAULT_PERSONALITY


def test_update_only_writes_known_fields(db):
    service = MediatorSettingsService(db)

    service.update("alice", {"tone": "gentle", "favourite_colour": "blue"})
    personality = service.update("alice", {"use_emoji": True})

    assert personality.tone == "gentle"
    assert personality.use_emoji is True
    assert personality.formality == DEFAULT_PERSONALITY.formality


def test_reset_restores_defaults(db):
    service = MediatorSettingsService(db)
    service.update("alice", {"tone": "direct"})

    assert service.reset("alice") == DEFAULT_PERSONALITY
    assert service.get_record("alice") is None


def test_personality_prompt_reflects_settings():
    prompt = build_personality_prompt(DEFAULT_PERSONALITY)

    assert "warm" in prompt.lower()


def test_settings_api_round_trip(client):
    assert client.get("/api/settings/mediator", headers=ALICE).json()["tone"] == "warm"

    updated = client.put(
        "/api/settings/mediator",
        json={"tone": "professional", "cultural_context": "We are both engineers"},
        headers=ALICE,
    )
    assert updated.status_code == 200
    assert updated.json()["tone"] == "professional"
    assert updated.json()["cultural_context"] == "We are both engineers"
    assert updated.json()["use_metaphors"] is True

    assert client.get("/api/settings/mediator", headers=ALICE).json()["tone"] == "professional"

    reset = client.delete("/api/settings/mediator", headers=ALICE)
    assert reset.json()["tone"] == "warm"


def test_settings_api_rejects_unknown_tone(client):
    response = client.put("/api/settings/mediator", json={"tone": "sarcastic"}, headers=ALICE)
    assert response.status_code == 400
