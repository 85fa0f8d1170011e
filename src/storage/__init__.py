"""
Storage modules for CineTweet.

- Connection: Builds the shared database handle
- Indexes: Idempotent index bootstrap
- Blobs: GridFS-backed file store
"""
