"""Travel style table and the helpers that bias itineraries toward it.

Trip interests are free-form tags chosen in the app ("Culinary",
"Nature", ...). They are normalized onto the fixed set of styles below,
which drive prompt text, activity ordering and the highlights section.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable, Mapping

logger = logging.getLogger(__name__)

NO_STYLE_CONTEXT = "No specific travel styles selected. Provide a balanced mix of activities."


@dataclass(frozen=True)
class TravelStyle:
    """One travel style and the vocabulary that identifies it."""

    label: str
    keywords: tuple[str, ...]
    search_terms: tuple[str, ...]
    activity_types: tuple[str, ...]
    description: str

    @property
    def match_terms(self) -> tuple[str, ...]:
        return self.keywords + self.activity_types


TRAVEL_STYLES: Mapping[str, TravelStyle] = MappingProxyType(
    {
        "shopping": TravelStyle(
            label="Shopping",
            keywords=("shopping", "retail", "markets", "malls", "boutiques", "outlets"),
            search_terms=(
                "shopping streets", "malls", "local markets",
                "outlets", "fashion districts", "shopping centers",
            ),
            activity_types=("shopping", "market", "mall", "boutique"),
            description="Shopping streets, malls, local markets, outlets, fashion districts",
        ),
        "nightlife": TravelStyle(
            label="Nightlife",
            keywords=("nightlife", "clubs", "bars", "lounges", "music", "entertainment"),
            search_terms=(
                "clubs", "cocktail bars", "rooftop bars",
                "live music venues", "nightclubs", "bars",
            ),
            activity_types=("nightlife", "bar", "club", "lounge"),
            description="Clubs, cocktail bars, rooftop bars, live music venues",
        ),
        "culture": TravelStyle(
            label="Culture",
            keywords=("culture", "museums", "history", "landmarks", "art", "heritage"),
            search_terms=(
                "museums", "historical sites", "landmarks",
                "cultural experiences", "galleries", "heritage sites",
            ),
            activity_types=("museum", "historical", "cultural", "art", "landmark"),
            description="Museums, historical sites, landmarks, cultural experiences",
        ),
        "nature": TravelStyle(
            label="Nature",
            keywords=("nature", "parks", "hiking", "beaches", "outdoor", "scenic"),
            search_terms=(
                "parks", "viewpoints", "hiking routes",
                "beaches", "nature reserves", "scenic spots",
            ),
            activity_types=("nature", "hiking", "beach", "park", "outdoor"),
            description="Parks, viewpoints, hiking routes, beaches, nature reserves",
        ),
        "food": TravelStyle(
            label="Food",
            keywords=("food", "dining", "restaurants", "cuisine", "culinary", "gastronomy"),
            search_terms=(
                "restaurants", "food tours", "cooking classes",
                "street food", "local cuisine", "food markets",
            ),
            activity_types=("restaurant", "food tour", "cooking class", "dining"),
            description="Restaurants, food tours, cooking classes, street food, local cuisine",
        ),
        "adventure": TravelStyle(
            label="Adventure",
            keywords=("adventure", "extreme", "sports", "activities", "thrilling", "adrenaline"),
            search_terms=(
                "adventure sports", "water sports", "rock climbing",
                "zip-lining", "paragliding", "extreme sports",
            ),
            activity_types=("adventure", "sports", "extreme", "water sports"),
            description="Adventure sports, water sports, rock climbing, zip-lining, paragliding",
        ),
        "relaxation": TravelStyle(
            label="Relaxation",
            keywords=("relaxation", "spa", "wellness", "retreat", "peaceful", "calm"),
            search_terms=(
                "spas", "wellness centers", "yoga retreats",
                "hot springs", "meditation", "peaceful spots",
            ),
            activity_types=("spa", "wellness", "yoga", "retreat"),
            description="Spas, wellness centers, yoga retreats, hot springs, meditation",
        ),
    }
)

# Tags offered by the app that are not style keys themselves
STYLE_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "culinary": "food",
        "foodie": "food",
        "gastronomy": "food",
        "cultural": "culture",
        "history": "culture",
        "art": "culture",
        "museums": "culture",
        "outdoors": "nature",
        "outdoor": "nature",
        "beach": "nature",
        "beaches": "nature",
        "hiking": "nature",
        "party": "nightlife",
        "sports": "adventure",
        "wellness": "relaxation",
        "spa": "relaxation",
        "relax": "relaxation",
    }
)


def normalize_styles(interests: Iterable[str] | None) -> list[str]:
    """Map interest tags onto style keys, keeping first-seen order.

    Unknown tags are dropped.
    """
    styles: list[str] = []
    for interest in interests or ():
        key = interest.strip().lower()
        key = STYLE_ALIASES.get(key, key)
        if key in TRAVEL_STYLES and key not in styles:
            styles.append(key)
    return styles


def _activity_text(activity: Mapping[str, Any]) -> str:
    return " ".join(
        str(activity.get(field) or "") for field in ("title", "description", "type")
    ).lower()


def _first_matching_style(activity: Mapping[str, Any], styles: list[str]) -> int | None:
    text = _activity_text(activity)
    for index, style in enumerate(styles):
        if any(term in text for term in TRAVEL_STYLES[style].match_terms):
            return index
    return None


def generate_style_specific_prompt(interests: Iterable[str] | None) -> str:
    """Build the prompt block describing the user's travel styles."""
    styles = normalize_styles(interests)
    if not styles:
        return NO_STYLE_CONTEXT

    descriptions = "\n".join(
        f"- {TRAVEL_STYLES[s].label}: {TRAVEL_STYLES[s].description}" for s in styles
    )
    keywords = list(dict.fromkeys(k for s in styles for k in TRAVEL_STYLES[s].keywords))
    labels = ", ".join(TRAVEL_STYLES[s].label for s in styles)

    return (
        f"User's selected travel styles:\n{descriptions}\n\n"
        f"Style keywords: {', '.join(keywords)}\n\n"
        f"IMPORTANT - Travel Style Personalization ({labels}):\n"
        "1. Prioritize activities that match these styles\n"
        "2. Include at least 1-2 activities per day that directly align with the selected styles\n"
        "3. When combining multiple styles, ensure variety and balance without duplicates\n"
        "4. Avoid generic sightseeing if style-specific alternatives exist\n"
        "5. Include specific, destination-relevant recommendations for each style"
    )


def filter_activities_by_style(
    activities: list[dict[str, Any]],
    interests: Iterable[str] | None,
) -> list[dict[str, Any]]:
    """Keep only activities matching at least one selected style.

    With no recognised styles every activity is kept.
    """
    styles = normalize_styles(interests)
    if not styles:
        return list(activities)
    return [a for a in activities if _first_matching_style(a, styles) is not None]


def prioritize_activities_by_style(
    activities: list[dict[str, Any]],
    interests: Iterable[str] | None,
) -> list[dict[str, Any]]:
    """Stable-sort activities by the first style they match.

    Activities matching the first selected style come first; unmatched
    activities keep their relative order at the end.
    """
    styles = normalize_styles(interests)
    if not styles:
        return list(activities)
    unmatched = len(styles)

    def rank(activity: dict[str, Any]) -> int:
        index = _first_matching_style(activity, styles)
        return unmatched if index is None else index

    return sorted(activities, key=rank)


def get_all_search_terms(interests: Iterable[str] | None) -> list[str]:
    """De-duplicated provider search terms for the selected styles."""
    styles = normalize_styles(interests)
    return list(dict.fromkeys(t for s in styles for t in TRAVEL_STYLES[s].search_terms))


def build_style_highlights(
    days: list[dict[str, Any]],
    interests: Iterable[str] | None,
) -> list[dict[str, Any]]:
    """Derive "Based on your travel style" highlights from day plans.

    Returns:
        One entry per style with at least one matching activity:
        ``{style, label, recommendations, count}`` where recommendations
        holds the first three matching titles.
    """
    activities = [a for day in days for a in day.get("activities") or []]
    highlights = []
    for style in normalize_styles(interests):
        config = TRAVEL_STYLES[style]
        matches = [
            a for a in activities
            if any(k in _activity_text(a) for k in config.keywords)
        ]
        if matches:
            highlights.append(
                {
                    "style": style,
                    "label": config.label,
                    "recommendations": [a.get("title") for a in matches[:3]],
                    "count": len(matches),
                }
            )
    logger.debug(f"Derived {len(highlights)} style highlights")
    return highlights
