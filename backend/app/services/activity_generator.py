"""Activity idea generator: keyword-driven suggestions for a destination.

Pure functions, no I/O. Randomness comes from an injectable ``random.Random``
so callers (and tests) can make the output deterministic.
"""

import random
import re
from collections import Counter
from dataclasses import asdict, dataclass

from app.data.activity_catalog import (
    ACTIVITY_CATEGORIES,
    ACTIVITY_TYPES,
    CATEGORY_BUDGET,
    CATEGORY_DURATIONS,
    DESCRIPTION_TEMPLATES,
    PLACE_WORDS,
    STOP_WORDS,
    TITLE_TEMPLATES,
    TYPE_BUDGET,
    TYPE_DURATIONS,
)

DEFAULT_CATEGORY = "CULTURE"
DEFAULT_ACTIVITY_TYPE = "LANDMARK"
GENERIC_PLACE_WORDS = ["spot", "place", "location", "area", "site"]


@dataclass
class ActivityIdea:
    title: str
    description: str
    category: str
    activity_type: str
    duration: float
    budget_category: str
    relevance_score: float

    def to_dict(self) -> dict:
        return asdict(self)


def extract_keywords(text: str | None, max_keywords: int = 15) -> list[str]:
    """Most frequent meaningful words in ``text``, most common first."""
    if not text:
        return []
    clean = re.sub(r"[^\w\s]", " ", text.lower())
    words = [w for w in clean.split() if len(w) > 2 and w not in STOP_WORDS]
    # Counter.most_common keeps first-seen order among equal counts
    return [word for word, _ in Counter(words).most_common(max_keywords)]


def _best_match(keywords: list[str], table: dict[str, list[str]], default: str) -> str:
    scores = dict.fromkeys(table, 0)
    for keyword in keywords:
        for name, vocabulary in table.items():
            if any(term in keyword or keyword in term for term in vocabulary):
                scores[name] += 1
    best = max(scores.values(), default=0)
    if best == 0:
        return default
    return next(name for name, score in scores.items() if score == best)


def determine_category(keywords: list[str]) -> str:
    return _best_match(keywords, ACTIVITY_CATEGORIES, DEFAULT_CATEGORY)


def determine_activity_type(keywords: list[str]) -> str:
    return _best_match(keywords, ACTIVITY_TYPES, DEFAULT_ACTIVITY_TYPE)


def determine_budget_category(activity_type: str, category: str) -> str:
    return TYPE_BUDGET.get(activity_type) or CATEGORY_BUDGET.get(category) or "activities"


def estimate_duration(activity_type: str, category: str, rng: random.Random) -> float:
    base = TYPE_DURATIONS.get(activity_type) or CATEGORY_DURATIONS.get(category) or 2
    return max(0.5, base + rng.uniform(-0.25, 0.25))


def generate_title(category: str, keywords: list[str], destination: str, rng: random.Random) -> str:
    template = rng.choice(TITLE_TEMPLATES.get(category, TITLE_TEMPLATES[DEFAULT_CATEGORY]))
    keyword = rng.choice(keywords) if keywords else destination
    place = rng.choice(PLACE_WORDS.get(category, GENERIC_PLACE_WORDS))
    title = template.replace("{keyword}", keyword).replace("{type}", place)
    if rng.random() > 0.7:
        title = f"{title} in {destination}"
    return title


def generate_description(category: str, destination: str, rng: random.Random) -> str:
    template = rng.choice(DESCRIPTION_TEMPLATES.get(category, DESCRIPTION_TEMPLATES[DEFAULT_CATEGORY]))
    return template.replace("{destination}", destination)


def relevance_score(keywords: list[str], template_items: list[dict] | None) -> float:
    """1 plus 0.5 for every keyword found in the template items' text, capped at 10."""
    if not template_items:
        return 1.0
    corpus = " ".join(
        f"{item.get('title') or ''} {item.get('description') or ''}" for item in template_items
    ).lower()
    score = 1.0 + 0.5 * sum(1 for keyword in keywords if keyword in corpus)
    return min(10.0, score)


def generate_activity_ideas(
    destination: str,
    keywords: list[str],
    template_items: list[dict] | None = None,
    count: int = 6,
    rng: random.Random | None = None,
) -> list[ActivityIdea]:
    """Build ``count`` ideas for ``destination``, highest relevance first."""
    rng = rng or random.Random()
    category = determine_category(keywords)
    activity_type = determine_activity_type(keywords)
    budget_category = determine_budget_category(activity_type, category)
    score = relevance_score(keywords, template_items)

    ideas = [
        ActivityIdea(
            title=generate_title(category, keywords, destination, rng),
            description=generate_description(category, destination, rng),
            category=category,
            activity_type=activity_type,
            duration=round(estimate_duration(activity_type, category, rng), 2),
            budget_category=budget_category,
            relevance_score=score,
        )
        for _ in range(count)
    ]
    ideas.sort(key=lambda idea: idea.relevance_score, reverse=True)
    return ideas
