"""Reading profile and recommendation MCP tools.

NOTE: Never use Optional parameters in MCP tools - they break MCP clients.
Use empty string "" for optional strings and 0 for optional integers.
"""

from typing import Any, Dict, List

from mcp.server.fastmcp import Context

from blog_notes.config import get_config
from blog_notes.errors import ConfigurationError, ValidationError
from blog_notes.identity import require_user
from blog_notes.log_system.unified_logger import UnifiedLogger
from blog_notes.models.schemas import (
    ContentDepth,
    ExpertiseLevel,
    PreferredLength,
    ReadingPreferences,
    UserProfile,
)
from blog_notes.services.recommender import aggregate_expertise, rank
from blog_notes.storage import database
from blog_notes.tools.blog_tools import article_to_dict


def _choice(enum_cls, value: str, field_name: str):
    if not value:
        return None
    try:
        return enum_cls(value.strip().lower())
    except ValueError:
        choices = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"Invalid {field_name} '{value}', expected one of: {choices}") from None


def profile_to_dict(profile: UserProfile) -> Dict[str, Any]:
    preferences = profile.reading_preferences
    return {
        "interests": list(profile.interests),
        "expertise_areas": {topic: level.value for topic, level in profile.expertise_areas.items()},
        "reading_preferences": {
            "preferred_length": preferences.preferred_length.value if preferences.preferred_length else None,
            "content_depth": preferences.content_depth.value if preferences.content_depth else None,
        },
        "learning_goals": list(profile.learning_goals),
    }


async def get_profile(ctx: Context = None) -> Dict[str, Any]:
    """Show your reading profile.

    Args:
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with success, has_profile and profile (null if none saved yet)
    """
    logger = UnifiedLogger.get_logger(__name__)
    logger.info("get_profile called")

    user = require_user()
    profile = await database.get_profile(user.id)

    return {
        "success": True,
        "has_profile": profile is not None,
        "profile": profile_to_dict(profile) if profile else None,
    }


async def save_profile(
    interests: List[str],
    expertise_areas: Dict[str, str],
    learning_goals: List[str],
    preferred_length: str = "",
    content_depth: str = "",
    ctx: Context = None,
) -> Dict[str, Any]:
    """Save your reading profile, replacing any previous one.

    Args:
        interests: Topics you care about, e.g. ["llm", "robotics"]
        expertise_areas: Topic to level, level one of beginner, intermediate, advanced, expert
        learning_goals: Free-text goals
        preferred_length: short, medium or long (empty string for no preference)
        content_depth: overview, detailed or technical (empty string for no preference)
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with success and the saved profile
    """
    logger = UnifiedLogger.get_logger(__name__)
    logger.info(f"save_profile called: {len(interests)} interests, {len(expertise_areas)} expertise areas")

    user = require_user()
    profile = UserProfile(
        user_id=user.id,
        interests=[i.strip() for i in interests if i.strip()],
        expertise_areas={
            topic.strip(): _choice(ExpertiseLevel, level, f"expertise level for '{topic}'")
            for topic, level in expertise_areas.items()
            if topic.strip() and level
        },
        reading_preferences=ReadingPreferences(
            preferred_length=_choice(PreferredLength, preferred_length, "preferred_length"),
            content_depth=_choice(ContentDepth, content_depth, "content_depth"),
        ),
        learning_goals=[g.strip() for g in learning_goals if g.strip()],
    )

    await database.save_profile(profile)

    return {
        "success": True,
        "profile": profile_to_dict(profile),
    }


async def recommend_articles(limit: int = 0, ctx: Context = None) -> Dict[str, Any]:
    """Suggest unread articles that match your profile.

    Args:
        limit: Number of recommendations (0 uses the server default of 5)
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with:
        - success: bool
        - count: number of recommendations
        - expertise_score: mean expertise level used for scoring
        - recommendations: list of article objects with blog_name and score
    """
    logger = UnifiedLogger.get_logger(__name__)
    logger.info(f"recommend_articles called: limit={limit}")

    user = require_user()
    profile = await database.get_profile(user.id)
    if profile is None:
        raise ConfigurationError(
            "Please set up your reading profile (save_profile) to see personalized recommendations"
        )

    articles = await database.list_articles(user.id, include_read=False)
    blog_names = await database.get_blog_names(user.id)
    top_n = limit if limit > 0 else get_config().recommendation_limit

    ranked = rank(articles, profile, blog_names, top_n=top_n)

    return {
        "success": True,
        "count": len(ranked),
        "expertise_score": aggregate_expertise(profile.expertise_areas),
        "recommendations": [
            {**article_to_dict(item.article), "blog_name": item.blog_name, "score": item.score}
            for item in ranked
        ],
    }


# List of profile tools for registration
profile_tools = [
    get_profile,
    save_profile,
    recommend_articles,
]
