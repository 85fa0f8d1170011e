"""
Unit tests for TweetIngestor (dual write of tweets).
"""

import pytest
import mongomock
from unittest.mock import MagicMock

from pymongo.errors import AutoReconnect

from src.ingestion.dual_write import IngestResult, TweetIngestor
from src.models.tweet import TweetEvent
from src.utils.errors import MalformedInputError, PartialIngestError


def make_payload(text="Gravity was stunning", **overrides):
    payload = {
        "id_str": "42",
        "created_at": "Wed Oct 10 20:19:24 +0000 2018",
        "text": text,
        "user": {"name": "Ada"},
        "coordinates": None,
        "geo": None,
        "place": None
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def db():
    database = mongomock.MongoClient().db
    database.movies.insert_many([
        {"title": "Gravity", "rating": 7.7, "votes": 850000},
        {"title": "Up", "rating": 8.3, "votes": 1000000},
    ])
    return database


@pytest.fixture
def ingestor(db):
    return TweetIngestor(db.movies, db.tweets)


def test_ingest_without_location(ingestor, db):
    """Test that an unlocated tweet is stored without any coordinates attribute."""
    result = ingestor.ingest("Gravity", make_payload())

    assert isinstance(result, IngestResult)
    assert result.movies_matched == 1

    stored = db.tweets.find_one({"_id": result.tweet_id})
    assert stored["movie"] == "Gravity"
    assert "coordinates" not in stored
    assert db.tweets.count_documents({"coordinates": {"$exists": True}}) == 0

    movie = db.movies.find_one({"title": "Gravity"})
    assert len(movie["tweets"]) == 1
    assert movie["tweets"][0]["user"] == "Ada"
    assert movie["tweets"][0]["text"] == "Gravity was stunning"
    assert movie["tweets"][0]["retweet"] is False
    assert "coordinates" not in movie["tweets"][0]


def test_ingest_with_geotag_writes_both_orders(ingestor, db):
    """Test standalone GeoJSON [lng, lat] and embedded [lat, lng] for a geotagged tweet."""
    payload = make_payload(coordinates={"type": "Point", "coordinates": [13.40, 52.52]})
    result = ingestor.ingest("Gravity", payload)

    stored = db.tweets.find_one({"_id": result.tweet_id})
    assert stored["coordinates"] == {"type": "Point", "coordinates": [13.40, 52.52]}

    embedded = db.movies.find_one({"title": "Gravity"})["tweets"][0]
    assert embedded["coordinates"] == [52.52, 13.40]


def test_ingest_with_place_only(ingestor, db):
    """Test that a place-only tweet is unlocated standalone but located when embedded."""
    place = {"bounding_box": {"coordinates": [[[13.08, 52.33], [13.76, 52.33]]]}}
    result = ingestor.ingest("Gravity", make_payload(place=place))

    assert "coordinates" not in db.tweets.find_one({"_id": result.tweet_id})
    assert db.movies.find_one({"title": "Gravity"})["tweets"][0]["coordinates"] == [52.33, 13.08]


def test_ingest_same_event_twice_duplicates(ingestor, db):
    """Test that re-ingesting a tweet stores it twice in both places."""
    payload = make_payload()
    first = ingestor.ingest("Gravity", payload)
    second = ingestor.ingest("Gravity", payload)

    assert first.tweet_id != second.tweet_id
    assert db.tweets.count_documents({"id_str": "42"}) == 2
    assert len(db.movies.find_one({"title": "Gravity"})["tweets"]) == 2


def test_ingest_appends_to_every_matching_movie(ingestor, db):
    """Test that duplicate titles all receive the embedded reference."""
    db.movies.insert_one({"title": "Gravity", "rating": 5.0, "votes": 10})

    result = ingestor.ingest("Gravity", make_payload())

    assert result.movies_matched == 2
    for movie in db.movies.find({"title": "Gravity"}):
        assert len(movie["tweets"]) == 1


def test_ingest_unknown_movie_still_stores_tweet(ingestor, db):
    """Test that a tweet for an unknown title is stored standalone with zero movies updated."""
    result = ingestor.ingest("Nonexistent", make_payload())

    assert result.movies_matched == 0
    assert db.tweets.count_documents({"movie": "Nonexistent"}) == 1
    assert db.movies.count_documents({"tweets": {"$exists": True}}) == 0


def test_ingest_appends_in_order(ingestor, db):
    """Test that embedded references keep arrival order."""
    ingestor.ingest("Up", make_payload(text="one"))
    ingestor.ingest("Up", make_payload(text="two"))

    assert [t["text"] for t in db.movies.find_one({"title": "Up"})["tweets"]] == ["one", "two"]


def test_ingest_accepts_parsed_event(ingestor, db):
    """Test that a TweetEvent can be passed instead of a raw payload."""
    event = TweetEvent.from_payload(make_payload())
    ingestor.ingest("Up", event)

    assert db.tweets.count_documents({"movie": "Up"}) == 1


def test_malformed_event_writes_nothing(ingestor, db):
    """Test that a malformed payload is rejected before any write."""
    with pytest.raises(MalformedInputError):
        ingestor.ingest("Gravity", make_payload(user={}))

    assert db.tweets.count_documents({}) == 0
    assert "tweets" not in db.movies.find_one({"title": "Gravity"})


def test_ingest_all_returns_results_in_order(ingestor, db):
    """Test that a batch ingest reports one result per tweet."""
    results = ingestor.ingest_all("Up", [make_payload(text="a"), make_payload(text="b")])

    assert len(results) == 2
    assert [db.tweets.find_one({"_id": r.tweet_id})["text"] for r in results] == ["a", "b"]


def test_ingest_all_partial_failure_reports_completed(ingestor, db):
    """Test that a failing event stops the batch and earlier events stay written."""
    events = [make_payload(text="ok 1"), make_payload(text="ok 2"), make_payload(user={}), make_payload(text="never")]

    with pytest.raises(PartialIngestError) as exc_info:
        ingestor.ingest_all("Up", events)

    err = exc_info.value
    assert err.failed_index == 2
    assert err.total == 4
    assert len(err.completed) == 2
    assert isinstance(err.__cause__, MalformedInputError)
    assert db.tweets.count_documents({}) == 2
    assert len(db.movies.find_one({"title": "Up"})["tweets"]) == 2


def test_store_failure_propagates_unchanged():
    """Test that a driver error from a single ingest is not wrapped."""
    movies, tweets = MagicMock(), MagicMock()
    tweets.insert_one.side_effect = AutoReconnect("connection reset")

    with pytest.raises(AutoReconnect):
        TweetIngestor(movies, tweets).ingest("Gravity", make_payload())

    movies.update_many.assert_not_called()


def test_store_failure_in_batch_is_chained():
    """Test that a driver error inside a batch is the cause of the partial failure."""
    movies, tweets = MagicMock(), MagicMock()
    tweets.insert_one.side_effect = [MagicMock(inserted_id=1), AutoReconnect("gone")]
    movies.update_many.return_value = MagicMock(matched_count=1, modified_count=1)

    with pytest.raises(PartialIngestError) as exc_info:
        TweetIngestor(movies, tweets).ingest_all("Gravity", [make_payload(), make_payload()])

    assert exc_info.value.failed_index == 1
    assert exc_info.value.completed == [IngestResult(tweet_id=1, movies_matched=1)]
    assert isinstance(exc_info.value.__cause__, AutoReconnect)
