"""
Tests for the travel style helpers.
"""

from planera.domains.trip.styles import (
    NO_STYLE_CONTEXT,
    build_style_highlights,
    filter_activities_by_style,
    generate_style_specific_prompt,
    get_all_search_terms,
    normalize_styles,
    prioritize_activities_by_style,
)


class TestNormalizeStyles:
    """Tests for mapping interest tags onto style keys."""

    def test_aliases_and_case(self):
        assert normalize_styles(["Culinary", "Nature", "museums"]) == ["food", "nature", "culture"]

    def test_unknown_and_duplicate_tags_dropped(self):
        assert normalize_styles(["food", "Foodie", "karaoke"]) == ["food"]

    def test_none(self):
        assert normalize_styles(None) == []


class TestStylePrompt:
    """Tests for the prompt block."""

    def test_no_styles(self):
        assert generate_style_specific_prompt([]) == NO_STYLE_CONTEXT

    def test_lists_selected_styles(self):
        prompt = generate_style_specific_prompt(["food", "culture"])
        assert "- Food: Restaurants, food tours" in prompt
        assert "- Culture: Museums" in prompt
        assert "(Food, Culture)" in prompt


class TestActivityOrdering:
    """Tests for filtering and prioritizing activities."""

    activities = [
        {"title": "Eiffel Tower", "type": "landmark"},
        {"title": "Seine boat ride", "type": "tour"},
        {"title": "Cooking class in the Marais", "type": "food"},
        {"title": "Louvre", "type": "museum"},
    ]

    def test_prioritize_is_stable_by_first_matching_style(self):
        ordered = prioritize_activities_by_style(self.activities, ["food", "culture"])
        assert [a["title"] for a in ordered] == [
            "Cooking class in the Marais",
            "Eiffel Tower",
            "Louvre",
            "Seine boat ride",
        ]

    def test_prioritize_without_styles_keeps_order(self):
        assert prioritize_activities_by_style(self.activities, []) == self.activities

    def test_filter_drops_unmatched(self):
        kept = filter_activities_by_style(self.activities, ["culture"])
        assert [a["title"] for a in kept] == ["Eiffel Tower", "Louvre"]

    def test_search_terms_deduplicated(self):
        terms = get_all_search_terms(["food", "culinary"])
        assert terms == list(dict.fromkeys(terms))
        assert "street food" in terms


class TestStyleHighlights:
    """Tests for deriving highlights from day plans."""

    def test_counts_and_first_three_titles(self):
        days = [
            {"activities": [
                {"title": "Food market", "type": "activity"},
                {"title": "Dinner", "description": "Local cuisine", "type": "restaurant"},
            ]},
            {"activities": [
                {"title": "Street food tour", "type": "activity"},
                {"title": "Cooking class", "description": "culinary workshop"},
                {"title": "Scenic park walk", "type": "activity"},
            ]},
        ]
        highlights = build_style_highlights(days, ["food", "nature"])

        food = highlights[0]
        assert food["style"] == "food"
        assert food["label"] == "Food"
        assert food["count"] == 4
        assert food["recommendations"] == ["Food market", "Dinner", "Street food tour"]
        assert highlights[1]["style"] == "nature"
        assert highlights[1]["recommendations"] == ["Scenic park walk"]

    def test_styles_without_matches_are_omitted(self):
        days = [{"activities": [{"title": "Museum visit"}]}]
        assert build_style_highlights(days, ["nightlife"]) == []
