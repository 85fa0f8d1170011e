"""
Movie data model.

Represents a movie document and the tweet references embedded in it.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class TweetReference:
    """
    Condensed tweet embedded in a movie's "tweets" array.
    Created only by the ingest path, never edited afterwards.
    """
    user: str  # Author display name
    text: str
    retweet: bool = False
    date: Optional[datetime] = None
    coordinates: Optional[List[float]] = None  # [lat, lng] when known

    def __post_init__(self):
        if self.coordinates is not None and len(self.coordinates) != 2:
            raise ValueError(f"Invalid coordinates: {self.coordinates}. Must be a [lat, lng] pair")

    @classmethod
    def from_dict(cls, data: dict) -> "TweetReference":
        """Create TweetReference from an embedded sub-document."""
        return cls(
            user=data["user"],
            text=data["text"],
            retweet=data.get("retweet", False),
            date=data.get("date"),
            coordinates=data.get("coordinates")
        )

    def to_dict(self) -> dict:
        """Convert to the embedded sub-document. Coordinates are omitted when unknown."""
        doc = {
            "user": self.user,
            "text": self.text,
            "retweet": self.retweet,
            "date": self.date
        }
        if self.coordinates is not None:
            doc["coordinates"] = list(self.coordinates)
        return doc


@dataclass
class Movie:
    """
    A movie document.

    Known attributes are typed fields; anything else the source data
    carried is kept in ``extra`` and written back unchanged.
    """
    title: str
    rating: Optional[float] = None
    votes: Optional[int] = None
    genre: List[str] = field(default_factory=list)
    comment: Optional[str] = None
    tweets: List[TweetReference] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    KNOWN_FIELDS = ("title", "title_lower", "rating", "votes", "genre", "comment", "tweets")

    @classmethod
    def from_dict(cls, data: dict) -> "Movie":
        """Create Movie from a stored document."""
        genre = data.get("genre") or []
        if isinstance(genre, str):
            genre = [genre]
        return cls(
            title=data["title"],
            rating=data.get("rating"),
            votes=data.get("votes"),
            genre=list(genre),
            comment=data.get("comment"),
            tweets=[TweetReference.from_dict(t) for t in data.get("tweets", [])],
            extra={k: v for k, v in data.items() if k not in cls.KNOWN_FIELDS}
        )

    def to_dict(self) -> dict:
        """
        Convert to a storable document.

        Unset optional attributes are left out so that "$exists" filters
        keep their meaning; in particular "tweets" is absent until the
        first tweet is pushed. "title_lower" is always derived from title.
        """
        doc = dict(self.extra)
        doc["title"] = self.title
        doc["title_lower"] = self.title.lower()  # Indexed key for prefix search
        if self.rating is not None:
            doc["rating"] = self.rating
        if self.votes is not None:
            doc["votes"] = self.votes
        if self.genre:
            doc["genre"] = list(self.genre)
        if self.comment is not None:
            doc["comment"] = self.comment
        if self.tweets:
            doc["tweets"] = [t.to_dict() for t in self.tweets]
        return doc
