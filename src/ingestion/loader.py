"""
Seed loader.

Fills the movies and tweets collections from static data files when the
store is (nearly) empty. Movies come from a CSV export or an Extended
JSON lines file; tweets from an Extended JSON lines file.
"""

import logging
import math
import os
from typing import Dict, Iterable, List

import pandas as pd
from bson import json_util
from pymongo.collection import Collection

from src.models.movie import Movie

logger = logging.getLogger(__name__)


class SeedLoader:
    """
    Bulk loader for the movies and tweets collections.
    """

    def __init__(self, movies: Collection, tweets: Collection, csv_genre_delimiter: str = "|"):
        """
        Initialize seed loader.

        Args:
            movies: The movies collection
            tweets: The tweets collection
            csv_genre_delimiter: Separator inside the CSV genre column
        """
        self.movies = movies
        self.tweets = tweets
        self.csv_genre_delimiter = csv_genre_delimiter

    def needs_seed(self, min_movies: int) -> bool:
        """True if fewer than ``min_movies`` movies are stored."""
        count = self.movies.count_documents({})
        logger.debug(f"Found {count} movies (seed threshold {min_movies})")
        return count < min_movies

    def clear(self) -> None:
        """Delete every movie and tweet."""
        movies_deleted = self.movies.delete_many({}).deleted_count
        tweets_deleted = self.tweets.delete_many({}).deleted_count
        logger.info(f"Cleared {movies_deleted} movies and {tweets_deleted} tweets")

    def bulk_insert(self, collection: Collection, documents: Iterable[dict]) -> int:
        """Insert documents in one batch. Returns the number inserted."""
        documents = list(documents)
        if not documents:
            return 0
        result = collection.insert_many(documents, ordered=False)
        logger.info(f"Inserted {len(result.inserted_ids)} documents into '{collection.name}'")
        return len(result.inserted_ids)

    def load_movies(self, path: str) -> int:
        """Load movies from a .csv file or an Extended JSON lines file."""
        if path.lower().endswith(".csv"):
            documents = self._read_movies_csv(path)
        else:
            documents = [Movie.from_dict(d).to_dict() for d in _read_json_lines(path) if "title" in d]
        return self.bulk_insert(self.movies, documents)

    def load_tweets(self, path: str) -> int:
        """Load tweets from an Extended JSON lines file."""
        return self.bulk_insert(self.tweets, _read_json_lines(path))

    def seed(self, movies_path: str, tweets_path: str) -> Dict[str, int]:
        """
        Replace both collections with the contents of the data files.

        A missing file is skipped with a warning. When neither file
        exists nothing is cleared and the stored data is kept.

        Returns:
            Number of documents loaded per collection
        """
        counts = {"movies": 0, "tweets": 0}
        if not os.path.exists(movies_path) and not os.path.exists(tweets_path):
            logger.warning(
                f"No seed data found at {movies_path} or {tweets_path}, keeping existing data"
            )
            return counts

        self.clear()

        if os.path.exists(movies_path):
            counts["movies"] = self.load_movies(movies_path)
        else:
            logger.warning(f"Movie data file not found: {movies_path}")

        if os.path.exists(tweets_path):
            counts["tweets"] = self.load_tweets(tweets_path)
        else:
            logger.warning(f"Tweet data file not found: {tweets_path}")

        logger.info(f"Seeded {counts['movies']} movies and {counts['tweets']} tweets")
        return counts

    def _read_movies_csv(self, path: str) -> List[dict]:
        df = pd.read_csv(path)
        documents = []
        for row in df.to_dict(orient="records"):
            # Empty CSV cells come back as NaN; leave those attributes out
            data = {k: v for k, v in row.items() if not _is_missing(v)}
            if "title" not in data:
                continue
            genre = data.get("genre")
            if isinstance(genre, str):
                data["genre"] = [g.strip() for g in genre.split(self.csv_genre_delimiter) if g.strip()]
            if "votes" in data:
                data["votes"] = int(data["votes"])
            if "rating" in data:
                data["rating"] = float(data["rating"])
            documents.append(Movie.from_dict(data).to_dict())
        logger.debug(f"Read {len(documents)} movies from {path}")
        return documents


def _is_missing(value) -> bool:
    return isinstance(value, float) and math.isnan(value)


def _read_json_lines(path: str) -> List[dict]:
    documents = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line:
                documents.append(json_util.loads(line))
    logger.debug(f"Read {len(documents)} documents from {path}")
    return documents
