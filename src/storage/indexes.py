"""
Index bootstrap.

Creates the indexes the query paths depend on. MongoDB treats creating
an existing index as a no-op, so every function here is safe to call
on each process start.
"""

import logging

from pymongo import ASCENDING, GEOSPHERE, TEXT
from pymongo.collection import Collection

logger = logging.getLogger(__name__)

TWEET_TEXT_INDEX = "tweet_text_user_name"


def ensure_indexes(movies: Collection, tweets: Collection) -> None:
    """
    Ensure the movie title text index, the lowercase title index used by
    prefix search, ascending rating and votes indexes, and the 2dsphere
    index on tweet coordinates.
    """
    backfill_title_lower(movies)
    movies.create_index([("title", TEXT)])
    movies.create_index([("title_lower", ASCENDING)])
    movies.create_index([("rating", ASCENDING)])
    movies.create_index([("votes", ASCENDING)])
    tweets.create_index([("coordinates", GEOSPHERE)])
    logger.info(f"Ensured indexes on '{movies.name}' and '{tweets.name}'")


def backfill_title_lower(movies: Collection) -> int:
    """
    Set "title_lower" on movies stored without it.

    Documents written through the Movie model already carry the field.
    $toLower only folds ASCII letters.
    """
    result = movies.update_many(
        {"title_lower": {"$exists": False}, "title": {"$type": "string"}},
        [{"$set": {"title_lower": {"$toLower": "$title"}}}]
    )
    if result.modified_count:
        logger.info(f"Backfilled title_lower on {result.modified_count} movies")
    return result.modified_count


def ensure_tweet_text_index(tweets: Collection) -> None:
    """Ensure the full-text index over tweet text and author name."""
    tweets.create_index([("text", TEXT), ("user.name", TEXT)], name=TWEET_TEXT_INDEX)
