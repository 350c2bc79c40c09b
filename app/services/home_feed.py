"""Home-page feed: highlight, recent posts and five fixed topical sections.

Input is the published set ordered newest first. Sections are built from the
whole ordered set, so the highlight and recent posts can appear again in a
section, and a post with labels from several groups appears in each of them.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

RECENT_COUNT = 2
SECTION_LIMIT = 4

# Section name -> category labels that place a post in it. Groups are disjoint.
SECTION_LABELS: dict[str, frozenset[str]] = {
    "news": frozenset({"domestic-news", "world-news"}),
    "experience": frozenset(
        {"cuisine", "destination", "travel-backpack", "green-transport"}
    ),
    "profiles": frozenset(
        {"green-citizen", "culture-ambassador", "green-enterprise"}
    ),
    "academic": frozenset({"green-tech", "sustainable-knowledge", "policy-data"}),
    "multimedia": frozenset({"photo", "video", "infographic", "emagazine"}),
}

SECTIONS = tuple(SECTION_LABELS)
LABEL_SECTION: dict[str, str] = {
    label: name for name, group in SECTION_LABELS.items() for label in group
}


@dataclass
class HomeFeed:
    """Aggregated home payload. Post items are whatever the caller passed in."""

    highlight: Any = None
    recent: list[Any] = field(default_factory=list)
    sections: dict[str, list[Any]] = field(
        default_factory=lambda: {name: [] for name in SECTIONS}
    )

    def as_dict(self) -> dict[str, Any]:
        return {"highlight": self.highlight, "recent": self.recent, **self.sections}


def sections_for(categories: Sequence[str] | None) -> list[str]:
    """Section name for each category label, in label order (unknown labels skipped)."""
    if not categories:
        return []
    return [LABEL_SECTION[label] for label in categories if label in LABEL_SECTION]


def build_home_feed(posts: Sequence[Any]) -> HomeFeed:
    """
    Build the home feed from published posts ordered newest first.

    Each post needs a `category` attribute (list of labels or None). Empty
    input yields no highlight and empty lists. Every label of a post adds it
    to that label's section, so two labels of one group add it twice. Each
    section keeps recency order and is cut to SECTION_LIMIT entries.
    """
    feed = HomeFeed()
    if not posts:
        return feed

    feed.highlight = posts[0]
    feed.recent = list(posts[1 : 1 + RECENT_COUNT])

    for post in posts:
        for name in sections_for(getattr(post, "category", None)):
            bucket = feed.sections[name]
            if len(bucket) < SECTION_LIMIT:
                bucket.append(post)
    return feed
