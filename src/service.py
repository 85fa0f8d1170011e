"""
Movie Service.

Composition root for the data-access layer: wires every component to
one shared database handle and runs startup bootstrap.
"""

import logging
from typing import Optional

from pymongo.database import Database

from src.ingestion.dual_write import TweetIngestor
from src.ingestion.loader import SeedLoader
from src.repositories.movies import MovieRepository
from src.repositories.tweets import TweetRepository
from src.storage.blobs import Blob, BlobStore
from src.storage.indexes import ensure_indexes
import config.settings as settings

logger = logging.getLogger(__name__)


class MovieService:
    """
    Entry point handed to the HTTP front end.

    Holds no state besides the database handle and the components built
    on it. Bootstrap order:
    1. Default blob → 2. Seed data (if below threshold) → 3. Indexes
    """

    def __init__(self, db: Database):
        """
        Initialize movie service.

        Args:
            db: Process-wide database handle, created once at startup
        """
        self.db = db
        movies = db[settings.MOVIES_COLLECTION]
        tweets = db[settings.TWEETS_COLLECTION]

        self.movies = MovieRepository(movies, genre_delimiter=settings.GENRE_DELIMITER)
        self.tweets = TweetRepository(tweets)
        self.ingestor = TweetIngestor(movies, tweets)
        self.loader = SeedLoader(movies, tweets, csv_genre_delimiter=settings.CSV_GENRE_DELIMITER)
        self.blobs = BlobStore(db, bucket=settings.GRIDFS_BUCKET)

        logger.info("MovieService initialized")

    def bootstrap(
        self,
        seed_min_movies: int = settings.SEED_MIN_MOVIES,
        movies_path: str = settings.MOVIES_DATA_PATH,
        tweets_path: str = settings.TWEETS_DATA_PATH
    ) -> None:
        """
        Prepare the store for queries. Safe to run on every start.

        Args:
            seed_min_movies: Reseed both collections when fewer movies are stored
            movies_path: Movie seed file
            tweets_path: Tweet seed file
        """
        self.blobs.seed(
            settings.DEFAULT_BLOB_NAME,
            settings.DEFAULT_BLOB_PATH,
            settings.DEFAULT_BLOB_CONTENT_TYPE
        )

        if self.loader.needs_seed(seed_min_movies):
            logger.info(f"Fewer than {seed_min_movies} movies stored, reseeding")
            self.loader.seed(movies_path, tweets_path)

        ensure_indexes(self.movies.collection, self.tweets.collection)
        logger.info("Bootstrap complete")

    def get_file(self, filename: str) -> Optional[Blob]:
        """Fetch a file, falling back to the default blob when it is missing."""
        blob = self.blobs.get(filename)
        if blob is None:
            logger.debug(f"Falling back to '{settings.DEFAULT_BLOB_NAME}' for '{filename}'")
            blob = self.blobs.get(settings.DEFAULT_BLOB_NAME)
        return blob
