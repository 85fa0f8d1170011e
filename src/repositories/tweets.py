"""
Tweet repository.

Query shapes over the standalone tweets collection: geotag existence,
newest-first listings, full-text search and radius search.
"""

import logging
from typing import List

from pymongo import DESCENDING
from pymongo.collection import Collection
from pymongo.cursor import Cursor

from src.storage.indexes import ensure_tweet_text_index
from src.utils.limits import apply_limit

logger = logging.getLogger(__name__)

METERS_PER_KM = 1000

# Fields needed to draw a tweet marker on a map
TAGGED_PROJECTION = {"text": 1, "movie": 1, "user.name": 1, "coordinates": 1}


class TweetRepository:
    """
    Read access to standalone tweet documents.

    "Newest first" always sorts on _id, which grows with insertion order,
    not on created_at, which can be missing or skewed.
    """

    def __init__(self, collection: Collection):
        self.collection = collection

    def geotagged(self, limit: int = 0) -> Cursor:
        """Tweets that have a coordinates attribute."""
        query = {"coordinates": {"$exists": True}}
        return apply_limit(self.collection.find(query), limit)

    def tagged_markers(self) -> Cursor:
        """Geotagged tweets projected to text, movie, user.name and coordinates, newest first."""
        query = {"coordinates": {"$exists": True}}
        return self.collection.find(query, TAGGED_PROJECTION).sort("_id", DESCENDING)

    def full_text_search(self, query: str) -> List[dict]:
        """
        Ranked full-text search over tweet text and author name.

        The text index is created on first use. Results come back in the
        server's relevance order with the score field removed.

        Args:
            query: Search string in MongoDB $text syntax (phrases, negation)

        Returns:
            Matching tweet documents
        """
        ensure_tweet_text_index(self.collection)

        score = {"$meta": "textScore"}
        cursor = self.collection.find(
            {"$text": {"$search": query}},
            {"score": score}
        ).sort([("score", score)])

        results = []
        for doc in cursor:
            doc.pop("score", None)
            results.append(doc)

        logger.debug(f"Full-text search '{query}' returned {len(results)} tweets")
        return results

    def newest(self, limit: int = 0) -> Cursor:
        """All tweets, newest first."""
        query = {"_id": {"$exists": True}}
        return apply_limit(self.collection.find(query).sort("_id", DESCENDING), limit)

    def near(self, lat: float, lng: float, radius_km: float) -> Cursor:
        """
        Tweets within ``radius_km`` of (lat, lng), nearest first.

        GeoJSON wants [lng, lat] and $maxDistance wants meters.
        """
        query = {
            "coordinates": {
                "$near": {
                    "$geometry": {"type": "Point", "coordinates": [lng, lat]},
                    "$maxDistance": radius_km * METERS_PER_KM
                }
            }
        }
        return self.collection.find(query)
