"""
Database handle.

Builds the single process-wide handle that every component receives
through its constructor.
"""

import logging

from pymongo import MongoClient
from pymongo.database import Database

logger = logging.getLogger(__name__)


def create_database(uri: str, database_name: str, server_selection_timeout_ms: int = 5000) -> Database:
    """
    Connect to MongoDB and select a database.

    Args:
        uri: MongoDB connection string
        database_name: Database holding the movies and tweets collections
        server_selection_timeout_ms: How long the driver waits for a server

    Returns:
        Database handle to be shared by all components

    Raises:
        pymongo.errors.ServerSelectionTimeoutError: If no server is reachable
    """
    client = MongoClient(uri, serverSelectionTimeoutMS=server_selection_timeout_ms)
    db = client[database_name]

    collections = db.list_collection_names()
    logger.info(f"Connected to MongoDB database '{database_name}' ({len(collections)} collections)")
    for name in sorted(collections):
        logger.debug(f"- {name}")

    return db
