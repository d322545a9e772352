from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

import main
from conftest import CountingClient, make_openai_stub
from narrative_client import DisabledNarrativeClient, OpenAINarrativeClient
from store import RecordStore


@pytest.fixture
def narrative():
    return CountingClient()


@pytest.fixture
def client(fake_db, narrative):
    main.app.dependency_overrides[main.get_store] = lambda: RecordStore(fake_db)
    main.app.dependency_overrides[main.get_narrative_client] = lambda: narrative
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()


def _create(client, user_id="user-1", full_name="Jane Doe") -> dict:
    res = client.post(
        "/api/autobiographies",
        json={"user_id": user_id, "personal_info": {"full_name": full_name}},
    )
    assert res.status_code == 200
    return res.json()


def test_root() -> None:
    res = TestClient(main.app).get("/")
    assert res.status_code == 200


def test_schema_lists_sections_and_styles() -> None:
    body = TestClient(main.app).get("/schema").json()
    assert len(body["autobiography"]["sections"]) == 7
    assert body["story"]["styles"] == ["emotional", "professional", "simple", "poetic"]


def test_create_get_and_list(client) -> None:
    created = _create(client)
    assert created["id"]
    assert created["personal_info"]["full_name"] == "Jane Doe"
    assert created["life_challenges"]["growth"] == ""

    res = client.get(f"/api/autobiographies/{created['id']}")
    assert res.json()["user_id"] == "user-1"

    listed = client.get("/api/autobiographies", params={"user_id": "user-1"}).json()
    assert [a["id"] for a in listed] == [created["id"]]


def test_missing_autobiography_is_404(client) -> None:
    assert client.get("/api/autobiographies/000000000000000000000000").status_code == 404
    assert client.get("/api/autobiographies/bogus").status_code == 404


def test_put_overwrites_record(client) -> None:
    created = _create(client)
    res = client.put(
        f"/api/autobiographies/{created['id']}",
        json={"user_id": "user-1", "education_journey": {"schools": "MIT"}},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["education_journey"]["schools"] == "MIT"
    assert body["personal_info"]["full_name"] == ""


def test_put_for_other_owner_is_404(client) -> None:
    created = _create(client)
    res = client.put(f"/api/autobiographies/{created['id']}", json={"user_id": "someone-else"})
    assert res.status_code == 404


def test_patch_replaces_single_field(client) -> None:
    created = _create(client)
    res = client.patch(
        f"/api/autobiographies/{created['id']}/sections/career_achievements",
        json={"user_id": "user-1", "field": "skills", "value": "Carpentry"},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["career_achievements"]["skills"] == "Carpentry"
    assert body["personal_info"]["full_name"] == "Jane Doe"


def test_patch_unknown_field_is_400(client) -> None:
    created = _create(client)
    res = client.patch(
        f"/api/autobiographies/{created['id']}/sections/career_achievements",
        json={"user_id": "user-1", "field": "salary", "value": "lots"},
    )
    assert res.status_code == 400
    assert res.json()["error_code"] == "invalid_request"


def test_timeline_route(client) -> None:
    created = _create(client)
    client.patch(
        f"/api/autobiographies/{created['id']}/sections/personal_info",
        json={"user_id": "user-1", "field": "date_of_birth", "value": "1990-02-03"},
    )
    events = client.get(f"/api/autobiographies/{created['id']}/timeline").json()
    assert events[0]["category"] == "Birth"
    assert events[0]["year"] == "1990"


def test_generate_inline_record(client, narrative) -> None:
    res = client.post(
        "/api/generate",
        json={"autobiography": {"personal_info": {"full_name": "Jane Doe"}}, "style": "simple"},
    )
    assert res.status_code == 200
    assert res.json() == {"content": "Hello story", "title": "Jane Doe's Life Story", "style": "simple"}
    assert len(narrative.prompts) == 1


def test_generate_does_not_persist(client, fake_db) -> None:
    client.post("/api/generate", json={"autobiography": {}, "style": "poetic"})
    assert fake_db.list_collection_names() == []


def test_generate_unknown_style_is_400_without_call(client, narrative) -> None:
    res = client.post("/api/generate", json={"autobiography": {}, "style": "dramatic"})
    assert res.status_code == 400
    assert res.json()["error_code"] == "invalid_style"
    assert narrative.prompts == []


def test_generate_missing_fields_is_400(client, narrative) -> None:
    assert client.post("/api/generate", json={"style": "simple"}).status_code == 400
    assert client.post("/api/generate", json={"autobiography": {}}).status_code == 400
    assert narrative.prompts == []


def test_generate_without_credential_is_503(client) -> None:
    main.app.dependency_overrides[main.get_narrative_client] = DisabledNarrativeClient
    res = client.post("/api/generate", json={"autobiography": {}, "style": "simple"})
    assert res.status_code == 503
    assert res.json()["error_code"] == "service_unavailable"


def test_generate_empty_response_is_502(client) -> None:
    stub = OpenAINarrativeClient("sk-test", "gpt-test", client=make_openai_stub(content=None))
    main.app.dependency_overrides[main.get_narrative_client] = lambda: stub
    res = client.post("/api/generate", json={"autobiography": {}, "style": "simple"})
    assert res.status_code == 502
    assert res.json()["error_code"] == "generation_failed"


def test_generate_from_stored_record(client, narrative) -> None:
    created = _create(client)
    res = client.post(f"/api/autobiographies/{created['id']}/generate", json={"style": "emotional"})
    assert res.status_code == 200
    assert res.json()["title"] == "Jane Doe's Life Story"
    assert "- Name: Jane Doe" in narrative.prompts[0]


def test_story_save_list_and_export(client) -> None:
    created = _create(client)
    res = client.post(
        "/api/stories",
        json={
            "user_id": "user-1",
            "autobiography_id": created["id"],
            "style": "simple",
            "content": "Chapter 1\nI was born.",
            "title": "",
        },
    )
    assert res.status_code == 200
    story = res.json()
    assert story["title"] == "Untitled Story"

    listed = client.get("/api/stories", params={"user_id": "user-1"}).json()
    assert [s["id"] for s in listed] == [story["id"]]

    txt = client.get(f"/api/stories/{story['id']}/export", params={"format": "txt"})
    assert txt.headers["content-type"].startswith("text/plain")
    assert 'filename="Untitled Story.txt"' in txt.headers["content-disposition"]
    assert txt.text == "Untitled Story\n\nChapter 1\nI was born."

    page = client.get(f"/api/stories/{story['id']}/export", params={"format": "html"})
    assert "<p>I was born.</p>" in page.text


def test_story_with_invalid_style_is_rejected(client) -> None:
    res = client.post(
        "/api/stories",
        json={"user_id": "u", "autobiography_id": "a", "style": "dramatic", "content": "x"},
    )
    assert res.status_code == 422


def test_export_unsaved_content(client) -> None:
    res = client.post("/api/export", json={"title": "Draft", "content": "Text", "format": "html"})
    assert res.status_code == 200
    assert "<h1>Draft</h1>" in res.text
    assert 'filename="Draft.html"' in res.headers["content-disposition"]


def test_store_routes_without_database(monkeypatch) -> None:
    monkeypatch.setattr(main, "db", None)
    res = TestClient(main.app).get("/api/autobiographies", params={"user_id": "u"})
    assert res.status_code == 500
