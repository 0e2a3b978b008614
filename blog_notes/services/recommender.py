"""Rank unread articles against a user's profile.

Scoring is additive:
- +2 for each interest found in the article title or its blog's name
- +1 if the title mentions "advanced" and the user's mean expertise is >= 3
- +1 if the title mentions "beginner" and the user's mean expertise is <= 2
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Sequence

from blog_notes.models.schemas import Article, ExpertiseLevel, UserProfile

DEFAULT_TOP_N = 5
INTEREST_POINTS = 2


@dataclass
class ScoredArticle:
    article: Article
    blog_name: str
    score: int


def aggregate_expertise(expertise_areas: Mapping[str, ExpertiseLevel]) -> float:
    """Mean expertise weight (1-4); 0.0 when no expertise is recorded."""
    if not expertise_areas:
        return 0.0
    weights = [ExpertiseLevel(level).weight for level in expertise_areas.values()]
    return sum(weights) / len(weights)


def score_article(article: Article, blog_name: str, profile: UserProfile, expertise: float) -> int:
    title = (article.title or "").lower()
    blog = (blog_name or "").lower()
    score = 0

    for interest in profile.interests:
        needle = interest.lower()
        if needle in title or needle in blog:
            score += INTEREST_POINTS

    if "advanced" in title and expertise >= 3:
        score += 1
    if "beginner" in title and expertise <= 2:
        score += 1

    return score


def rank(
    articles: Sequence[Article],
    profile: UserProfile,
    blog_names: Dict[int, str],
    top_n: int = DEFAULT_TOP_N,
) -> List[ScoredArticle]:
    """Top unread articles by score, highest first.

    Articles with equal scores keep their input order.
    """
    expertise = aggregate_expertise(profile.expertise_areas)

    scored = []
    for article in articles:
        if article.is_read:
            continue
        blog_name = blog_names.get(article.blog_id, "")
        scored.append(ScoredArticle(
            article=article,
            blog_name=blog_name,
            score=score_article(article, blog_name, profile, expertise),
        ))

    scored.sort(key=lambda item: item.score, reverse=True)
    return scored[:max(top_n, 0)]
