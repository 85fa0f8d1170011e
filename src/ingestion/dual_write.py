"""
Tweet ingestion.

Writes each incoming tweet twice: once as a standalone document in the
tweets collection and once as a reference appended to the tweets array
of every movie with the matching title.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Union

from pymongo.collection import Collection

from src.models.tweet import TweetEvent
from src.utils.errors import PartialIngestError

logger = logging.getLogger(__name__)


@dataclass
class IngestResult:
    """Outcome of one ingested tweet."""
    tweet_id: Any  # _id of the standalone document
    movies_matched: int  # Movies that received the embedded reference


class TweetIngestor:
    """
    Dual-write path for tweets.

    The two writes are separate single-document operations. A reader can
    observe the standalone tweet before the embedded reference exists.
    There is no deduplication: ingesting the same tweet twice stores it
    twice in both places.
    """

    def __init__(self, movies: Collection, tweets: Collection):
        """
        Initialize ingestor.

        Args:
            movies: The movies collection
            tweets: The standalone tweets collection
        """
        self.movies = movies
        self.tweets = tweets

    def ingest(self, movie_title: str, event: Union[TweetEvent, dict]) -> IngestResult:
        """
        Store one tweet for ``movie_title``.

        Args:
            movie_title: Title the streaming keyword matched
            event: Parsed TweetEvent or the raw payload

        Returns:
            IngestResult with the new tweet id and number of movies updated

        Raises:
            MalformedInputError: If the payload cannot be parsed (nothing is written)
        """
        if not isinstance(event, TweetEvent):
            event = TweetEvent.from_payload(event)

        standalone = event.to_standalone_document(movie_title)
        reference = event.to_reference().to_dict()

        inserted = self.tweets.insert_one(standalone)
        updated = self.movies.update_many(
            {"title": movie_title},
            {"$push": {"tweets": reference}}
        )

        one_line = event.text.replace("\n", " ")
        logger.info(f"{movie_title:<20} {event.user_name:<20} {one_line}")
        logger.debug(
            f"Stored tweet {inserted.inserted_id}, appended to {updated.modified_count} movie(s)"
        )
        return IngestResult(tweet_id=inserted.inserted_id, movies_matched=updated.matched_count)

    def ingest_all(self, movie_title: str, events: Iterable[Union[TweetEvent, dict]]) -> List[IngestResult]:
        """
        Ingest tweets one after another.

        Returns:
            One IngestResult per tweet, in order

        Raises:
            PartialIngestError: If any tweet fails. Earlier tweets stay
                written; the error lists them in ``completed``.
        """
        events = list(events)
        results = []
        for index, event in enumerate(events):
            try:
                results.append(self.ingest(movie_title, event))
            except Exception as e:
                logger.error(f"Ingest for '{movie_title}' failed at event {index}: {e}")
                raise PartialIngestError(
                    completed=results,
                    failed_index=index,
                    total=len(events),
                    reason=str(e)
                ) from e

        logger.info(f"Ingested {len(results)} tweets for '{movie_title}'")
        return results
