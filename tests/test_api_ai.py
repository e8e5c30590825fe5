import json

from core.errors import UpstreamServiceError

REPLY = {
    "name": "Shakshuka",
    "recipe_cuisine": "Israeli",
    "recipe_category": "breakfast",
    "total_time": "30 min",
    "servings": "2",
    "ingredients": ["4 eggs", "1 can tomatoes", "1 onion"],
    "instructions": ["Soften onion.", "Add tomatoes.", "Poach eggs in the sauce."],
}
RAW = "Shakshuka for two: eggs, tomatoes, onion..."


def test_parse_without_saving(client, fake_llm):
    fake_llm.queue("```json\n" + json.dumps(REPLY) + "\n```")

    r = client.post("/api/v1/parse-recipe", json={"rawText": RAW})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["name"] == "Shakshuka"
    assert body["total_time"] == 30
    assert body["saved"] is False
    assert body["id"] is None
    assert client.get("/api/v1/recipes").json() == []


def test_parse_and_save(client, fake_llm):
    fake_llm.queue(REPLY)

    r = client.post("/api/v1/parse-recipe", json={"rawText": RAW, "saveToDb": True})
    body = r.json()
    assert body["saved"] is True

    saved = client.get(f"/api/v1/recipes/{body['id']}").json()
    assert saved["name"] == "Shakshuka"
    assert saved["ingredients"] == REPLY["ingredients"]
    assert saved["raw_text"] == RAW


def test_parse_rejects_blank_text(client, fake_llm):
    assert client.post("/api/v1/parse-recipe", json={"rawText": "   "}).status_code == 422
    assert client.post("/api/v1/parse-recipe", json={}).status_code == 422
    assert fake_llm.calls == []


def test_incomplete_extraction_is_502_and_nothing_saved(client, fake_llm):
    fake_llm.queue({**REPLY, "instructions": []})

    r = client.post("/api/v1/parse-recipe", json={"rawText": RAW, "saveToDb": True})
    assert r.status_code == 502
    assert "instructions" in r.json()["detail"]
    assert client.get("/api/v1/recipes").json() == []


def test_upstream_failure_is_502(client, fake_llm):
    fake_llm.queue(UpstreamServiceError("Gemini request failed: 503 overloaded"))
    r = client.post("/api/v1/parse-recipe", json={"raw_text": RAW})
    assert r.status_code == 502
    assert r.json()["detail"] == "Gemini request failed: 503 overloaded"


def test_suggest_for_empty_meal(client, fake_llm):
    fake_llm.queue({"suggestions": [{"name": "Rice and Beans", "category": "main"}]})

    r = client.post("/api/v1/suggest-dishes", json={"currentItems": []})
    assert r.status_code == 200, r.text
    [s] = r.json()["suggestions"]
    assert s["name"] == "Rice and Beans"
    assert s["searchQuery"] == "rice and beans"
    assert "(empty meal" in fake_llm.prompts[0]


def test_suggest_uses_stored_vocabulary(client, fake_llm, tabbouleh):
    client.post("/api/v1/recipes", json=tabbouleh)
    fake_llm.queue([{"name": "Hummus", "searchQuery": "hummus"}])

    r = client.post(
        "/api/v1/suggest-dishes",
        json={"currentItems": [{"type": "recipe", "name": "Tabbouleh", "category": "salad"}]},
    )
    assert r.status_code == 200
    prompt = fake_llm.prompts[0]
    assert "Available recipe categories in database: salad" in prompt
    assert "Available cuisines in database: Lebanese" in prompt


def test_suggest_requires_current_items(client):
    assert client.post("/api/v1/suggest-dishes", json={}).status_code == 422


def test_suggest_bad_reply_is_502(client, fake_llm):
    fake_llm.queue("no idea, sorry")
    r = client.post("/api/v1/suggest-dishes", json={"currentItems": []})
    assert r.status_code == 502
