"""Blog and article MCP tools.

NOTE: Never use Optional parameters in MCP tools - they break MCP clients.
Use empty string "" for optional strings and 0 for optional integers.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from mcp.server.fastmcp import Context

from blog_notes.errors import NotFoundError, ValidationError
from blog_notes.identity import require_user
from blog_notes.log_system.unified_logger import UnifiedLogger
from blog_notes.models.schemas import Article, Blog, ReadingStatus
from blog_notes.storage import database
from blog_notes.storage.seed import DEFAULT_BLOGS


def _normalize_url(url: str) -> str:
    url = url.strip()
    if url and not url.startswith(("http://", "https://")):
        url = "https://" + url
    return url


def parse_date(value: str, field_name: str) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise ValidationError(
            f"Invalid '{field_name}' date format: {value}. Use ISO format like '2025-01-01'"
        ) from None


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def blog_to_dict(blog: Blog) -> Dict[str, Any]:
    return {
        "id": blog.id,
        "name": blog.name,
        "url": blog.url,
        "category": blog.category,
        "last_visited": _iso(blog.last_visited),
    }


def article_to_dict(article: Article) -> Dict[str, Any]:
    return {
        "id": article.id,
        "blog_id": article.blog_id,
        "title": article.title,
        "url": article.url,
        "author": article.author,
        "date_published": _iso(article.date_published),
        "is_read": article.is_read,
        "date_read": _iso(article.date_read),
        "reading_status": article.reading_status.value,
        "progress_updated_at": _iso(article.progress_updated_at),
    }


async def add_blog(
    name: str,
    url: str,
    category: str = "",
    ctx: Context = None,
) -> Dict[str, Any]:
    """Add a blog to follow.

    Args:
        name: Display name for the blog, unique among your blogs
        url: Homepage URL of the blog (normalized to https:// if no scheme)
        category: Optional category label (empty string for none)
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with:
        - success: bool
        - blog: object with id, name, url, category, last_visited
        - error: string if success is False
    """
    logger = UnifiedLogger.get_logger(__name__)
    logger.info(f"add_blog called: name={name}, url={url}")

    user = require_user()
    name, url = name.strip(), _normalize_url(url)
    if not name or not url:
        raise ValidationError("Please fill in both name and URL")

    blog = await database.add_blog(user.id, name=name, url=url, category=category.strip() or None)

    return {
        "success": True,
        "blog": blog_to_dict(blog),
    }


async def update_blog(
    blog_id: int,
    name: str = "",
    url: str = "",
    category: str = "",
    ctx: Context = None,
) -> Dict[str, Any]:
    """Edit a blog's name, URL or category.

    Args:
        blog_id: ID of the blog (from list_blogs)
        name: New name (empty string keeps the current one)
        url: New homepage URL (empty string keeps the current one)
        category: New category (empty string keeps the current one)
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with success and the updated blog
    """
    logger = UnifiedLogger.get_logger(__name__)
    logger.info(f"update_blog called: blog_id={blog_id}")

    user = require_user()
    blog = await database.update_blog(
        user.id,
        blog_id,
        name=name.strip() or None,
        url=_normalize_url(url) or None,
        category=category.strip() or None,
    )
    if blog is None:
        raise NotFoundError(f"Blog with id {blog_id} not found")

    return {
        "success": True,
        "blog": blog_to_dict(blog),
    }


async def remove_blog(blog_id: int, ctx: Context = None) -> Dict[str, Any]:
    """Remove a blog together with its articles and notes.

    This permanently deletes the blog, its articles and every note taken on
    it. This action cannot be undone.

    Args:
        blog_id: ID of the blog to remove (from list_blogs)
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with:
        - success: bool
        - message: confirmation string if successful
        - articles_deleted: count of articles removed
        - notes_deleted: count of notes removed
        - error: string if blog not found
    """
    logger = UnifiedLogger.get_logger(__name__)
    logger.info(f"remove_blog called: blog_id={blog_id}")

    user = require_user()
    success, article_count, note_count = await database.remove_blog(user.id, blog_id)

    if not success:
        raise NotFoundError(f"Blog with id {blog_id} not found")

    return {
        "success": True,
        "message": f"Removed blog {blog_id}, {article_count} articles and {note_count} notes",
        "articles_deleted": article_count,
        "notes_deleted": note_count,
    }


async def list_blogs(ctx: Context = None) -> Dict[str, Any]:
    """List your blogs with article, unread and note counts.

    Args:
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with:
        - success: bool
        - count: number of blogs
        - blogs: list of blog objects with id, name, url, category,
          last_visited, total_articles, unread_articles, total_notes
    """
    logger = UnifiedLogger.get_logger(__name__)
    logger.info("list_blogs called")

    user = require_user()
    blogs = await database.list_blogs(user.id)

    return {
        "success": True,
        "count": len(blogs),
        "blogs": blogs,
    }


async def visit_blog(blog_id: int, ctx: Context = None) -> Dict[str, Any]:
    """Record a visit to a blog and return its URL to open.

    Args:
        blog_id: ID of the blog (from list_blogs)
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with success and the blog, including the new last_visited
    """
    logger = UnifiedLogger.get_logger(__name__)
    logger.info(f"visit_blog called: blog_id={blog_id}")

    user = require_user()
    blog = await database.touch_blog(user.id, blog_id)
    if blog is None:
        raise NotFoundError(f"Blog with id {blog_id} not found")

    return {
        "success": True,
        "blog": blog_to_dict(blog),
    }


async def seed_blogs(ctx: Context = None) -> Dict[str, Any]:
    """Add a starter list of AI/ML blogs. Blogs you already have are skipped.

    Args:
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with success and blogs_added count
    """
    logger = UnifiedLogger.get_logger(__name__)
    logger.info("seed_blogs called")

    user = require_user()
    added = await database.seed_blogs(user.id, DEFAULT_BLOGS)

    return {
        "success": True,
        "blogs_added": added,
    }


async def add_article(
    blog_id: int,
    title: str,
    url: str,
    author: str = "",
    date_published: str = "",
    ctx: Context = None,
) -> Dict[str, Any]:
    """Track an article from one of your blogs.

    Args:
        blog_id: ID of the blog the article belongs to
        title: Article title
        url: Article URL
        author: Optional author (empty string for none)
        date_published: Optional publish date in ISO format (empty string for none)
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with success and the created article
    """
    logger = UnifiedLogger.get_logger(__name__)
    logger.info(f"add_article called: blog_id={blog_id}, title={title}")

    user = require_user()
    title, url = title.strip(), _normalize_url(url)
    if not title or not url:
        raise ValidationError("Article title and URL are required")

    if await database.get_blog(user.id, blog_id) is None:
        raise NotFoundError(f"Blog with id {blog_id} not found")

    article = await database.add_article(
        user.id,
        blog_id=blog_id,
        title=title,
        url=url,
        author=author.strip() or None,
        date_published=parse_date(date_published, "date_published"),
    )

    return {
        "success": True,
        "article": article_to_dict(article),
    }


async def list_articles(
    blog_id: int = 0,
    include_read: bool = True,
    limit: int = 50,
    ctx: Context = None,
) -> Dict[str, Any]:
    """List tracked articles, newest first.

    Args:
        blog_id: Only articles from this blog (0 for all blogs)
        include_read: Include articles already marked as read (default: True)
        limit: Maximum number of articles to return (default: 50)
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with:
        - success: bool
        - count: number of articles returned
        - read_count: how many of them are read
        - articles: list of article objects
    """
    logger = UnifiedLogger.get_logger(__name__)
    logger.info(f"list_articles called: blog_id={blog_id}, include_read={include_read}, limit={limit}")

    user = require_user()
    articles = await database.list_articles(
        user.id,
        blog_id=blog_id or None,
        include_read=include_read,
        limit=limit if limit > 0 else None,
    )

    return {
        "success": True,
        "count": len(articles),
        "read_count": sum(1 for a in articles if a.is_read),
        "articles": [article_to_dict(a) for a in articles],
    }


async def mark_article_read(article_id: int, ctx: Context = None) -> Dict[str, Any]:
    """Mark an article as read.

    Args:
        article_id: Database ID of the article (from list_articles response)
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with success and the updated article
    """
    logger = UnifiedLogger.get_logger(__name__)
    logger.info(f"mark_article_read called: article_id={article_id}")

    user = require_user()
    article = await database.mark_article_read(user.id, article_id)
    if article is None:
        raise NotFoundError(f"Article with id {article_id} not found")

    return {
        "success": True,
        "article": article_to_dict(article),
    }


async def mark_article_unread(article_id: int, ctx: Context = None) -> Dict[str, Any]:
    """Mark an article as unread.

    Args:
        article_id: Database ID of the article (from list_articles response)
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with success and the updated article
    """
    logger = UnifiedLogger.get_logger(__name__)
    logger.info(f"mark_article_unread called: article_id={article_id}")

    user = require_user()
    article = await database.mark_article_unread(user.id, article_id)
    if article is None:
        raise NotFoundError(f"Article with id {article_id} not found")

    return {
        "success": True,
        "article": article_to_dict(article),
    }


async def update_reading_progress(
    article_id: int,
    status: str,
    ctx: Context = None,
) -> Dict[str, Any]:
    """Record how far you are through an article.

    Args:
        article_id: Database ID of the article
        status: One of not_started, in_progress, completed
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with success and the updated article
    """
    logger = UnifiedLogger.get_logger(__name__)
    logger.info(f"update_reading_progress called: article_id={article_id}, status={status}")

    try:
        reading_status = ReadingStatus(status.strip().lower())
    except ValueError:
        raise ValidationError(
            f"Invalid status '{status}', expected not_started, in_progress or completed"
        ) from None

    user = require_user()
    article = await database.update_reading_progress(user.id, article_id, reading_status)
    if article is None:
        raise NotFoundError(f"Article with id {article_id} not found")

    return {
        "success": True,
        "article": article_to_dict(article),
    }


async def delete_article(article_id: int, ctx: Context = None) -> Dict[str, Any]:
    """Delete an article. Notes taken on it are kept, without the article link.

    Args:
        article_id: Database ID of the article
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with success and a confirmation message
    """
    logger = UnifiedLogger.get_logger(__name__)
    logger.info(f"delete_article called: article_id={article_id}")

    user = require_user()
    if not await database.delete_article(user.id, article_id):
        raise NotFoundError(f"Article with id {article_id} not found")

    return {
        "success": True,
        "message": f"Deleted article {article_id}",
    }


# List of blog and article tools for registration
blog_tools = [
    add_blog,
    update_blog,
    remove_blog,
    list_blogs,
    visit_blog,
    seed_blogs,
    add_article,
    list_articles,
    mark_article_read,
    mark_article_unread,
    update_reading_progress,
    delete_article,
]
