"""
Movie repository.

Query shapes over the movies collection: exact title lookup, rating and
vote thresholds, genre sets, title prefix and substring regexes,
existence filters on embedded tweets, and comment updates.
"""

import logging
import re
from typing import List, Optional

from pymongo.collection import Collection
from pymongo.cursor import Cursor

from src.utils.errors import MalformedInputError
from src.utils.limits import apply_limit

logger = logging.getLogger(__name__)


class MovieRepository:
    """
    Read and comment-write access to movie documents.

    Every multi-result method returns a lazy, single-pass cursor.
    A limit <= 0 means no limit.
    """

    def __init__(self, collection: Collection, genre_delimiter: str = ","):
        """
        Initialize movie repository.

        Args:
            collection: The movies collection from the shared database handle
            genre_delimiter: Separator used in genre filter strings
        """
        self.collection = collection
        self.genre_delimiter = genre_delimiter

    def find_by_title(self, title: str) -> Optional[dict]:
        """Return the first movie whose title equals ``title``, or None."""
        return self.collection.find_one({"title": title})

    def best_movies(self, min_votes: int, min_rating: float, limit: int = 0) -> Cursor:
        """Movies with at least ``min_votes`` votes and a rating of at least ``min_rating``."""
        query = {
            "votes": {"$gte": min_votes},
            "rating": {"$gte": min_rating}
        }
        return apply_limit(self.collection.find(query), limit)

    def by_genres(self, genre_list: str, limit: int = 0) -> Cursor:
        """
        Movies tagged with every genre in ``genre_list``.

        Args:
            genre_list: Delimiter-separated genres, e.g. "Action,Comedy"
            limit: Maximum number of movies

        Raises:
            MalformedInputError: If no genre is given
        """
        genres = self._split_genres(genre_list)
        return apply_limit(self.collection.find({"genre": {"$all": genres}}), limit)

    def by_title_prefix(self, prefix: str, limit: int = 0) -> Cursor:
        """
        Case-insensitive title prefix match.

        Matches against the stored lowercase title with a case-sensitive,
        anchored pattern so the ascending title_lower index bounds the scan.
        """
        pattern = re.compile("^" + re.escape(prefix.lower()))
        return apply_limit(self.collection.find({"title_lower": pattern}), limit)

    def suggest(self, fragment: str, limit: int = 0) -> Cursor:
        """
        Typeahead suggestions: titles containing ``fragment`` anywhere.

        Unanchored, so unlike by_title_prefix it cannot use the
        title_lower index and scans every title. Results carry only the title.
        """
        pattern = re.compile(re.escape(fragment), re.IGNORECASE)
        projection = {"_id": False, "title": True}
        return apply_limit(self.collection.find({"title": pattern}, projection), limit)

    def tweeted_movies(self) -> Cursor:
        """Movies that have a tweets array."""
        return self.collection.find({"tweets": {"$exists": True}})

    def geotagged_movies(self) -> Cursor:
        """Movies with at least one embedded tweet that has coordinates."""
        return self.collection.find({"tweets.coordinates": {"$exists": True}})

    def save_comment(self, title: str, comment: str) -> None:
        """
        Overwrite the comment of the movie with this title.

        Last write wins. An unknown title matches nothing and is not an error.
        """
        result = self.collection.update_one({"title": title}, {"$set": {"comment": comment}})
        logger.info(f"Saved comment for '{title}' (matched {result.matched_count})")

    def by_tweet_keyword(self, keyword: str, limit: int = 0) -> Cursor:
        """
        Movies with an embedded tweet whose text contains ``keyword``.

        Unanchored regex over every embedded tweet: a full scan. Kept for
        comparison with TweetRepository.full_text_search.
        """
        pattern = re.compile(re.escape(keyword), re.IGNORECASE)
        return apply_limit(self.collection.find({"tweets.text": pattern}), limit)

    def _split_genres(self, genre_list: str) -> List[str]:
        genres = [g.strip() for g in (genre_list or "").split(self.genre_delimiter)]
        genres = [g for g in genres if g]
        if not genres:
            raise MalformedInputError(f"Invalid genre list: {genre_list!r}")
        return genres
