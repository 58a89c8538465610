"""
Unit tests for the hybrid recommendation ranking.
"""

import pytest

from neurmatic.recommendations import engine
from neurmatic.recommendations.engine import (
    Candidate,
    ContentItem,
    Recommendation,
    explain,
    merge_candidates,
    score_collaborative,
    score_content_based,
    score_trending,
    top_candidates,
)


class TestScoreCollaborative:
    def test_normalizes_by_best_item(self):
        interactions = [("a1", "u1"), ("a1", "u2"), ("a2", "u2")]
        similar = [("u1", 2.0), ("u2", 1.0)]

        scores = {c.id: c.score for c in score_collaborative(interactions, similar)}

        assert scores["a1"] == pytest.approx(50.0)
        assert scores["a2"] == pytest.approx(50.0 / 3)

    def test_small_totals_are_not_inflated(self):
        scores = score_collaborative([("a1", "u1")], [("u1", 0.5)])
        # Normalizer never drops below 1
        assert scores[0].score == pytest.approx(25.0)

    def test_ignores_unknown_users(self):
        assert score_collaborative([("a1", "stranger")], [("u1", 1.0)]) == []

    def test_no_similar_users(self):
        assert score_collaborative([("a1", "u1")], []) == []

    def test_source_is_collaborative(self):
        [candidate] = score_collaborative([("a1", "u1")], [("u1", 3.0)])
        assert candidate.source == engine.COLLABORATIVE


class TestScoreContentBased:
    def test_share_of_matching_tags(self):
        items = [ContentItem("a1", ("LLM", "RAG")), ContentItem("a2", ("rag", "agents", "tools", "evals"))]

        scores = {c.id: c.score for c in score_content_based(items, ["rag", "llm"])}

        assert scores["a1"] == pytest.approx(30.0)
        assert scores["a2"] == pytest.approx(7.5)

    def test_drops_items_without_overlap_or_tags(self):
        items = [ContentItem("a1", ()), ContentItem("a2", ("vision",))]
        assert score_content_based(items, ["rag"]) == []

    def test_no_interests(self):
        assert score_content_based([ContentItem("a1", ("rag",))], []) == []


class TestScoreTrending:
    def test_rank_decay(self):
        scores = [c.score for c in score_trending(["t1", "t2", "t3", "t4"])]
        assert scores == pytest.approx([20.0, 15.0, 10.0, 5.0])

    def test_empty(self):
        assert score_trending([]) == []


class TestMergeCandidates:
    def test_sums_scores_and_tracks_sources(self):
        merged = merge_candidates(
            [Candidate("x", 40.0, engine.COLLABORATIVE)],
            [Candidate("x", 20.0, engine.CONTENT), Candidate("y", 10.0, engine.CONTENT)],
        )

        by_id = {c.id: c for c in merged}
        assert by_id["x"].score == pytest.approx(60.0)
        assert by_id["x"].sources == [engine.COLLABORATIVE, engine.CONTENT]
        assert by_id["y"].sources == [engine.CONTENT]

    def test_caps_at_100(self):
        merged = merge_candidates(
            [Candidate("x", 50.0, engine.COLLABORATIVE)],
            [Candidate("x", 30.0, engine.CONTENT)],
            [Candidate("x", 30.0, engine.TRENDING)],
        )
        assert merged[0].score == 100.0

    def test_excluded_ids_never_appear(self):
        merged = merge_candidates([Candidate("x", 1.0, engine.TRENDING), Candidate("y", 1.0, engine.TRENDING)], exclude_ids={"x"})
        assert [c.id for c in merged] == ["y"]


class TestTopCandidates:
    def test_sorted_and_limited(self):
        merged = merge_candidates([Candidate(str(i), float(i), engine.TRENDING) for i in range(30)])

        top = top_candidates(merged)

        assert len(top) == engine.MAX_PER_TYPE
        assert top[0].id == "29"
        assert top[-1].id == "10"


class TestExplain:
    @pytest.mark.parametrize(
        "sources,text",
        [
            ([engine.CONTENT, engine.COLLABORATIVE], "Because users with similar interests liked this"),
            ([engine.CONTENT, engine.TRENDING], "Trending in the community"),
            ([engine.CONTENT], "Based on your interests and past activity"),
            ([], "Recommended for you"),
        ],
    )
    def test_priority(self, sources, text):
        assert explain(sources) == text


def test_recommendation_dict_form():
    rec = Recommendation(type="article", id="a1", relevance_score=42, explanation="x", data={"title": "T"})
    assert Recommendation.from_dict(rec.to_dict()) == rec
