"""
Blob store.

Named binary files with a content type, kept in GridFS.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, BinaryIO, Optional, Union

import gridfs
from pymongo.database import Database

logger = logging.getLogger(__name__)


@dataclass
class Blob:
    """A stored file. ``stream`` is the open GridFS handle and is read once."""
    filename: str
    content_type: Optional[str]
    length: int
    upload_date: Optional[datetime]
    stream: Any

    def read(self) -> bytes:
        return self.stream.read()


class BlobStore:
    """
    Saves and fetches files by name.

    Saving replaces every earlier file with the same name by deleting
    them and then writing the new one. The two steps are not atomic: a
    concurrent reader can briefly find no file under that name.
    """

    def __init__(self, db: Database, bucket: str = "fs", fs: Optional[gridfs.GridFS] = None):
        """
        Initialize blob store.

        Args:
            db: Shared database handle
            bucket: GridFS collection prefix
            fs: Prebuilt GridFS instance (defaults to one over db/bucket)
        """
        self.fs = fs if fs is not None else gridfs.GridFS(db, collection=bucket)
        logger.info(f"Initialized BlobStore on bucket '{bucket}'")

    def put(self, filename: str, data: Union[bytes, BinaryIO], content_type: str) -> Any:
        """
        Store a file, replacing any previous file of the same name.

        Args:
            filename: Name to store the file under
            data: Bytes or a readable binary stream
            content_type: MIME type recorded with the file

        Returns:
            The new file's id
        """
        removed = 0
        for old in self.fs.find({"filename": filename}):
            self.fs.delete(old._id)
            removed += 1

        file_id = self.fs.put(data, filename=filename, metadata={"contentType": content_type})
        logger.info(f"Saved blob '{filename}' ({content_type}), replaced {removed} earlier version(s)")
        return file_id

    def get(self, filename: str) -> Optional[Blob]:
        """
        Fetch the newest file stored under ``filename``.

        Returns:
            The Blob, or None if no file has that name
        """
        grid_out = self.fs.find_one({"filename": filename}, sort=[("uploadDate", -1)])
        if grid_out is None:
            logger.debug(f"No blob named '{filename}'")
            return None

        metadata = grid_out.metadata or {}
        return Blob(
            filename=grid_out.filename,
            content_type=metadata.get("contentType"),
            length=grid_out.length,
            upload_date=grid_out.upload_date,
            stream=grid_out
        )

    def seed(self, filename: str, path: str, content_type: str) -> Any:
        """Store the file at ``path`` under ``filename``, replacing any earlier copy."""
        with open(path, "rb") as f:
            return self.put(filename, f, content_type)
