"""Tests for keyword-driven activity ideas."""
import random

from app.services.activity_generator import (
    determine_activity_type,
    determine_category,
    extract_keywords,
    generate_activity_ideas,
    relevance_score,
)


class TestExtractKeywords:

    def test_most_frequent_first_without_stop_words(self):
        keywords = extract_keywords("The beach, the BEACH and a hike!")
        assert keywords == ["beach", "hike"]

    def test_short_words_dropped(self):
        assert extract_keywords("go to an ok spa") == ["spa"]

    def test_empty_text(self):
        assert extract_keywords(None) == []
        assert extract_keywords("") == []

    def test_limit(self):
        text = " ".join(f"word{i}" for i in range(30))
        assert len(extract_keywords(text, max_keywords=5)) == 5


class TestCategoryMatching:

    def test_best_scoring_category(self):
        assert determine_category(["beach", "hike"]) == "NATURE"

    def test_no_match_falls_back_to_culture(self):
        assert determine_category([]) == "CULTURE"
        assert determine_category(["zzz"]) == "CULTURE"

    def test_tie_goes_to_first_declared_category(self):
        assert determine_category(["spa", "bar"]) == "RELAXATION"

    def test_activity_type(self):
        assert determine_activity_type(["beach"]) == "BEACH"
        assert determine_activity_type([]) == "LANDMARK"


class TestRelevanceScore:

    def test_without_template_items(self):
        assert relevance_score(["beach"], None) == 1.0

    def test_half_point_per_matching_keyword(self):
        items = [{"title": "Beach day", "description": None}]
        assert relevance_score(["beach", "tram"], items) == 1.5

    def test_capped_at_ten(self):
        keywords = [f"k{i}" for i in range(40)]
        items = [{"title": " ".join(keywords), "description": ""}]
        assert relevance_score(keywords, items) == 10.0


class TestGenerateActivityIdeas:

    def test_seeded_generation_is_deterministic(self):
        first = generate_activity_ideas("Lisbon", ["beach"], count=4, rng=random.Random(7))
        second = generate_activity_ideas("Lisbon", ["beach"], count=4, rng=random.Random(7))
        assert [i.to_dict() for i in first] == [i.to_dict() for i in second]

    def test_ideas_share_category_and_type(self):
        ideas = generate_activity_ideas("Lisbon", ["beach"], count=5, rng=random.Random(1))

        assert len(ideas) == 5
        assert {i.category for i in ideas} == {"NATURE"}
        assert {i.activity_type for i in ideas} == {"BEACH"}
        assert all(i.duration >= 0.5 for i in ideas)

    def test_destination_used_when_no_keywords(self):
        ideas = generate_activity_ideas("Porto", [], count=3, rng=random.Random(3))
        assert all(i.description for i in ideas)
        assert any("Porto" in i.title or "Porto" in i.description for i in ideas)
