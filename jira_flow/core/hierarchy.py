"""Hierarchy classification rules: issue type -> category, category pair -> link type.

Both lookups are ordered rule tables ending in a default, so the tie-break
order is explicit: the first matching rule wins.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Literal

Category = Literal["project", "feature", "epic", "story"]
LinkType = Literal["project_to_feature", "feature_to_epic", "epic_to_story"]

CATEGORIES: tuple[Category, ...] = ("project", "feature", "epic", "story")
LINK_TYPES: tuple[LinkType, ...] = ("project_to_feature", "feature_to_epic", "epic_to_story")

# (substring of the lower-cased issue type name, category)
CATEGORY_RULES: Sequence[tuple[str, Category]] = (
    ("project", "project"),
    ("feature", "feature"),
    ("epic", "epic"),
)
DEFAULT_CATEGORY: Category = "story"

# ((source category, target category), link type)
LINK_TYPE_RULES: Sequence[tuple[tuple[str, str], LinkType]] = (
    (("project", "feature"), "project_to_feature"),
    (("feature", "epic"), "feature_to_epic"),
)
DEFAULT_LINK_TYPE: LinkType = "epic_to_story"

# Label used for project -> parentless issue links, whatever the child's category
ORPHAN_LINK_TYPE: LinkType = "project_to_feature"


def classify_issue_type(issue_type: str | None) -> Category:
    """Map an issue type name to its hierarchy category.

    >>> classify_issue_type("Epic")
    'epic'
    >>> classify_issue_type("Sub-task")
    'story'
    """
    name = (issue_type or "").lower()
    for keyword, category in CATEGORY_RULES:
        if keyword in name:
            return category
    return DEFAULT_CATEGORY


def resolve_link_type(source_category: str, target_category: str) -> LinkType:
    """Label a parent -> child edge from the two endpoint categories.

    Only (project, feature) and (feature, epic) have dedicated labels; every
    other pairing falls back to ``epic_to_story``, so the label does not
    round-trip to the real category pair.
    """
    pair = (source_category, target_category)
    for rule_pair, link_type in LINK_TYPE_RULES:
        if pair == rule_pair:
            return link_type
    return DEFAULT_LINK_TYPE
