"""
Configuration settings for CineTweet.

Centralized configuration for the store connection, collections,
seeding and logging.
"""

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_ROOT = PROJECT_ROOT / "data"

# MongoDB connection
MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://127.0.0.1:27017")
MONGODB_DATABASE = os.getenv("MONGODB_DATABASE", "imdb")
SERVER_SELECTION_TIMEOUT_MS = int(os.getenv("SERVER_SELECTION_TIMEOUT_MS", "5000"))

# Collections
MOVIES_COLLECTION = os.getenv("MOVIES_COLLECTION", "movies")
TWEETS_COLLECTION = os.getenv("TWEETS_COLLECTION", "tweets")
GRIDFS_BUCKET = os.getenv("GRIDFS_BUCKET", "fs")

# Seeding: collections are refilled when fewer movies than this are stored
SEED_MIN_MOVIES = int(os.getenv("SEED_MIN_MOVIES", "10000"))
MOVIES_DATA_PATH = os.getenv("MOVIES_DATA_PATH", str(DATA_ROOT / "movies.json"))
TWEETS_DATA_PATH = os.getenv("TWEETS_DATA_PATH", str(DATA_ROOT / "tweets.json"))

# Default blob served when a requested file is missing
DEFAULT_BLOB_NAME = os.getenv("DEFAULT_BLOB_NAME", "sample.png")
DEFAULT_BLOB_PATH = os.getenv("DEFAULT_BLOB_PATH", str(DATA_ROOT / "sample.png"))
DEFAULT_BLOB_CONTENT_TYPE = os.getenv("DEFAULT_BLOB_CONTENT_TYPE", "image/png")

# Query parsing
GENRE_DELIMITER = ","  # Separator in genre filters from callers
CSV_GENRE_DELIMITER = "|"  # Separator inside the genre column of CSV seed files

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = os.getenv("LOG_FILE", "cinetweet.log")
