"""Storage layer for blog_notes."""

from .database import (
    get_database,
    init_database,
    close_database,
    add_blog,
    get_blog,
    list_blogs,
    get_blog_names,
    update_blog,
    touch_blog,
    remove_blog,
    seed_blogs,
    add_article,
    get_article,
    list_articles,
    mark_article_read,
    mark_article_unread,
    update_reading_progress,
    delete_article,
    add_note,
    list_notes,
    get_profile,
    save_profile,
)

__all__ = [
    "get_database",
    "init_database",
    "close_database",
    "add_blog",
    "get_blog",
    "list_blogs",
    "get_blog_names",
    "update_blog",
    "touch_blog",
    "remove_blog",
    "seed_blogs",
    "add_article",
    "get_article",
    "list_articles",
    "mark_article_read",
    "mark_article_unread",
    "update_reading_progress",
    "delete_article",
    "add_note",
    "list_notes",
    "get_profile",
    "save_profile",
]
