"""
Tweet event model.

Validated view over one raw tweet payload (Twitter v1.1 JSON) as
delivered by the streaming source, plus the two documents derived
from it by the ingest path.
"""

import copy
from dataclasses import dataclass, field
from datetime import datetime
from numbers import Real
from typing import Any, Dict, Optional, Tuple

from src.models.movie import TweetReference
from src.utils.errors import MalformedInputError

TWITTER_DATE_FORMAT = "%a %b %d %H:%M:%S %z %Y"


@dataclass
class TweetEvent:
    """
    One incoming tweet.

    ``payload`` is the full native document; the typed fields are the
    parts the ingest path needs. Locations are (latitude, longitude).
    """
    user_name: str
    text: str
    retweet: bool = False
    created_at: Optional[datetime] = None
    geo_location: Optional[Tuple[float, float]] = None  # Explicit geotag
    place_corner: Optional[Tuple[float, float]] = None  # First bounding-box corner of the place
    payload: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: dict) -> "TweetEvent":
        """
        Parse a raw tweet payload.

        Raises:
            MalformedInputError: If user name or text is missing, or a
                date or coordinate field is present but unusable
        """
        if not isinstance(payload, dict):
            raise MalformedInputError(f"Tweet payload must be an object, got {type(payload).__name__}")

        user = payload.get("user") or {}
        user_name = user.get("name") if isinstance(user, dict) else None
        if not user_name:
            raise MalformedInputError("Tweet payload is missing user.name")

        text = payload.get("text")
        if text is None:
            raise MalformedInputError("Tweet payload is missing text")

        return cls(
            user_name=user_name,
            text=text,
            retweet=_is_retweet(payload),
            created_at=_parse_created_at(payload.get("created_at")),
            geo_location=_parse_geo_location(payload),
            place_corner=_parse_place_corner(payload.get("place")),
            payload=payload
        )

    @property
    def location(self) -> Optional[Tuple[float, float]]:
        """Best known (lat, lng): the explicit geotag, else the place corner."""
        return self.geo_location or self.place_corner

    def to_standalone_document(self, movie_title: str) -> dict:
        """
        Build the document for the tweets collection.

        The native payload is copied and tagged with the matching movie.
        "coordinates" is a GeoJSON Point ([lng, lat]) when the tweet is
        explicitly geotagged and is removed entirely otherwise.
        """
        doc = copy.deepcopy(self.payload)
        doc["movie"] = movie_title
        if self.geo_location is None:
            doc.pop("coordinates", None)
        else:
            lat, lng = self.geo_location
            doc["coordinates"] = {"type": "Point", "coordinates": [lng, lat]}
        return doc

    def to_reference(self) -> TweetReference:
        """Build the sub-document appended to the movie's tweets array ([lat, lng])."""
        location = self.location
        return TweetReference(
            user=self.user_name,
            text=self.text,
            retweet=self.retweet,
            date=self.created_at,
            coordinates=list(location) if location else None
        )


def _is_retweet(payload: dict) -> bool:
    if payload.get("retweeted_status"):
        return True
    return payload.get("retweeted") is True


def _parse_created_at(value) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise MalformedInputError(f"Invalid created_at: {value!r}")

    try:
        return datetime.strptime(value, TWITTER_DATE_FORMAT)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise MalformedInputError(f"Invalid created_at: {value!r}") from None


def _pair(values, context: str) -> Tuple[float, float]:
    if (
        not isinstance(values, (list, tuple))
        or len(values) != 2
        or not all(isinstance(v, Real) and not isinstance(v, bool) for v in values)
    ):
        raise MalformedInputError(f"Invalid {context}: {values!r}. Must be two numbers")
    return float(values[0]), float(values[1])


def _parse_geo_location(payload: dict) -> Optional[Tuple[float, float]]:
    # GeoJSON "coordinates" is [lng, lat]; the legacy "geo" field is [lat, lng]
    coordinates = payload.get("coordinates")
    if coordinates:
        lng, lat = _pair(coordinates.get("coordinates") if isinstance(coordinates, dict) else coordinates,
                         "coordinates")
        return lat, lng

    geo = payload.get("geo")
    if geo:
        return _pair(geo.get("coordinates") if isinstance(geo, dict) else geo, "geo")
    return None


def _parse_place_corner(place) -> Optional[Tuple[float, float]]:
    if not isinstance(place, dict):
        return None
    box = place.get("bounding_box") or {}
    rings = box.get("coordinates") if isinstance(box, dict) else None
    if not rings:
        return None
    if not isinstance(rings, (list, tuple)) or not isinstance(rings[0], (list, tuple)):
        raise MalformedInputError(f"Invalid place.bounding_box: {rings!r}")
    if not rings[0]:
        return None
    lng, lat = _pair(rings[0][0], "place.bounding_box")
    return lat, lng
