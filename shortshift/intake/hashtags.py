"""Hashtag suggestions derived from a Short's title, description and tags."""

import re
from collections import Counter

MAX_HASHTAGS = 8
MAX_RANKED = 5
MAX_INLINE = 3
MIN_TOKEN_LENGTH = 4

STOPWORDS = frozenset(
    {
        "the",
        "and",
        "with",
        "your",
        "that",
        "this",
        "from",
        "about",
        "shorts",
        "video",
        "youtube",
    }
)

_NON_WORD = re.compile(r"[^a-z0-9\s]")
_NON_TAG = re.compile(r"[^a-z0-9_]")


def extract_inline_hashtags(text: str) -> list[str]:
    """Return hashtags already written in the text, in order.

    Tags are lowercased and stripped to letters, digits and underscores;
    tags that end up empty are dropped.
    """
    tags = []
    for token in text.lower().split():
        if not token.startswith("#"):
            continue
        tag = _NON_TAG.sub("", token)
        if tag:
            tags.append(f"#{tag}")
    return tags


def rank_keywords(text: str, limit: int = MAX_RANKED) -> list[str]:
    """Return the most frequent keywords in the text.

    Ties keep the order in which the words first appear.
    """
    tokens = [
        token
        for token in _NON_WORD.sub(" ", text.lower()).split()
        if len(token) >= MIN_TOKEN_LENGTH and token not in STOPWORDS
    ]
    return [word for word, _ in Counter(tokens).most_common(limit)]


def suggest_hashtags(title: str, description: str, free_tags: str) -> list[str]:
    """Suggest up to eight distinct hashtags for a Short.

    Hashtags written inline in the description come first (at most three),
    followed by the top keywords across all three inputs.

    Args:
        title: Video title
        description: Video description
        free_tags: Free-form tags as typed by the user

    Returns:
        Hashtags, each starting with ``#``
    """
    inline = extract_inline_hashtags(description)[:MAX_INLINE]
    ranked = [f"#{word}" for word in rank_keywords(f"{title} {description} {free_tags}")]
    return list(dict.fromkeys(inline + ranked))[:MAX_HASHTAGS]
