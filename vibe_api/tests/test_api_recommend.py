"""
Recommendation Endpoint Tests

/api/recommend, /api/vibe, /api/similar/{id} and /api/hidden-gems over a
four-title catalog (see conftest.CATALOG).

Test Scenarios:
---------------
- Seen items never appear, filtered_seen counts them
- Judge picks lead, similarity order fills the rest
- Judge failure degrades to similarity order with fallback explanations
- Embedding failure -> 502
- Find-similar excludes the source; unknown source -> 404
- Hidden gems ranked by quality minus popularity penalty

Run:
----
    pytest vibe_api/tests/test_api_recommend.py -v
"""

import pytest


def _ids(recs):
    return [r["media"]["id"] for r in recs]


class TestRecommend:
    def test_seen_items_excluded(self, client):
        client.post("/api/seen", json={"user_id": "u1", "media_id": "movie-Blade-Runner"})
        res = client.post("/api/recommend", json={"user_id": "u1", "query": "neon", "use_judge": False})
        assert res.status_code == 200
        body = res.json()
        assert "movie-Blade-Runner" not in _ids(body["recommendations"])
        assert _ids(body["recommendations"])[0] == "anime-Ghost-in-the-Shell"
        assert body["filtered_seen"] == 1
        assert body["total_candidates"] == 3
        assert body["judge_status"] == "skipped"

    def test_judge_picks_lead(self, client, chat):
        chat.rankings = [
            {"media_id": "anime-Mushishi", "rank": 1, "explanation": "quiet and gentle"},
        ]
        res = client.post("/api/recommend", json={"user_id": "u2", "query": "neon", "limit": 3})
        body = res.json()
        assert body["judge_status"] == "judged"
        assert _ids(body["recommendations"]) == [
            "anime-Mushishi",
            "movie-Blade-Runner",
            "anime-Ghost-in-the-Shell",
        ]
        assert body["recommendations"][0]["explanation"] == "quiet and gentle"
        assert body["recommendations"][0]["vibe_score"] == pytest.approx(0.0)
        assert body["recommendations"][1]["vibe_score"] == pytest.approx(1.0)

    def test_judge_failure_degrades(self, client, chat):
        chat.error = RuntimeError("rate limited")
        res = client.post("/api/recommend", json={"user_id": "u2", "query": "neon", "limit": 2})
        assert res.status_code == 200
        body = res.json()
        assert body["judge_status"] == "degraded"
        assert _ids(body["recommendations"]) == ["movie-Blade-Runner", "anime-Ghost-in-the-Shell"]
        assert body["recommendations"][0]["explanation"].startswith("Vibe match based on: ")

    def test_everything_seen_is_empty_not_error(self, client):
        for media_id in ("movie-Blade-Runner", "anime-Ghost-in-the-Shell", "anime-Mushishi", "movie-Solaris"):
            client.post("/api/seen", json={"user_id": "u3", "media_id": media_id})
        body = client.post("/api/recommend", json={"user_id": "u3", "query": "neon"}).json()
        assert body["recommendations"] == []
        assert body["filtered_seen"] == 4

    def test_embedding_failure_is_502(self, client, embedder):
        embedder.error = RuntimeError("provider down")
        res = client.post("/api/recommend", json={"user_id": "u1", "query": "neon"})
        assert res.status_code == 502

    def test_missing_query_rejected(self, client):
        assert client.post("/api/recommend", json={"user_id": "u1", "query": ""}).status_code == 422

    def test_without_chat_model_judge_skipped(self, bare_client):
        body = bare_client.post("/api/recommend", json={"user_id": "u1", "query": "cozy"}).json()
        assert body["judge_status"] == "skipped"
        assert _ids(body["recommendations"])[0] == "anime-Mushishi"
        assert body["recommendations"][0]["explanation"].startswith("Vibe match: ")


class TestVibe:
    def test_quick_search(self, client, chat):
        chat.rankings = [{"media_id": "movie-Solaris", "rank": 1, "explanation": "vast"}]
        body = client.get("/api/vibe", params={"q": "space"}).json()
        assert body["input"] == "space"
        assert _ids(body["recommendations"])[0] == "movie-Solaris"
        assert len(body["recommendations"]) == 4

    def test_empty_query_is_400(self, client):
        res = client.get("/api/vibe", params={"q": "  "})
        assert res.status_code == 400
        assert "Tell me your vibe" in res.json()["detail"]


class TestSimilar:
    def test_source_excluded(self, client):
        body = client.get("/api/similar/movie-Blade-Runner").json()
        ids = _ids(body["recommendations"])
        assert body["source_id"] == "movie-Blade-Runner"
        assert "movie-Blade-Runner" not in ids
        assert ids == ["anime-Ghost-in-the-Shell", "anime-Mushishi", "movie-Solaris"]
        assert body["recommendations"][0]["explanation"].startswith("Similar vibe to source: ")

    def test_seen_excluded_and_limit(self, client):
        client.post("/api/seen", json={"user_id": "u1", "media_id": "anime-Ghost-in-the-Shell"})
        body = client.get("/api/similar/movie-Blade-Runner", params={"user_id": "u1", "limit": 1}).json()
        assert _ids(body["recommendations"]) == ["anime-Mushishi"]

    def test_unknown_source_is_404(self, client):
        assert client.get("/api/similar/movie-Nope").status_code == 404


class TestHiddenGems:
    def test_ranked_by_gem_score(self, client):
        body = client.get("/api/hidden-gems").json()
        # Solaris: 0.2 is not above 0.8 * 0.5
        assert [m["id"] for m in body["hidden_gems"]] == [
            "anime-Ghost-in-the-Shell",
            "anime-Mushishi",
            "movie-Blade-Runner",
        ]

    def test_seen_excluded_before_limit(self, client):
        client.post("/api/seen", json={"user_id": "u1", "media_id": "anime-Ghost-in-the-Shell"})
        body = client.get("/api/hidden-gems", params={"user_id": "u1", "limit": 1}).json()
        assert [m["id"] for m in body["hidden_gems"]] == ["anime-Mushishi"]
        assert body["user_id"] == "u1"
