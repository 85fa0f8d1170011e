"""
Ingestion modules for CineTweet.

- Dual write: Stores incoming tweets standalone and inside matching movies
- Loader: Bulk seeding from static data files
"""
