"""
Unit tests for the Movie and TweetReference models.
"""

import pytest

from src.models.movie import Movie, TweetReference


def test_movie_keeps_unknown_attributes():
    """Test that passthrough attributes survive a from_dict/to_dict cycle."""
    data = {
        "_id": "tt1454468",
        "title": "Gravity",
        "rating": 7.7,
        "votes": 850000,
        "genre": ["Drama", "Sci-Fi"],
        "year": 2013
    }
    movie = Movie.from_dict(data)

    assert movie.extra == {"_id": "tt1454468", "year": 2013}
    assert movie.to_dict() == {**data, "title_lower": "gravity"}


def test_title_lower_is_derived_not_passed_through():
    """Test that a stale stored title_lower is rewritten from the title."""
    movie = Movie.from_dict({"title": "Die Hard", "title_lower": "stale"})

    assert "title_lower" not in movie.extra
    assert movie.to_dict()["title_lower"] == "die hard"


def test_movie_without_tweets_has_no_tweets_attribute():
    """Test that an empty tweets list is not written, so $exists stays meaningful."""
    doc = Movie(title="Gravity", rating=7.7).to_dict()

    assert "tweets" not in doc
    assert "comment" not in doc


def test_single_genre_string_becomes_list():
    """Test that a scalar genre is normalised to a list."""
    assert Movie.from_dict({"title": "Up", "genre": "Animation"}).genre == ["Animation"]


def test_reference_rejects_bad_coordinates():
    """Test that coordinates must be a pair."""
    with pytest.raises(ValueError):
        TweetReference(user="Ada", text="hi", coordinates=[1.0, 2.0, 3.0])


def test_movie_parses_embedded_references():
    """Test that embedded tweets become TweetReference objects."""
    movie = Movie.from_dict({
        "title": "Gravity",
        "tweets": [{"user": "Ada", "text": "wow", "retweet": True, "date": None}]
    })

    assert len(movie.tweets) == 1
    assert movie.tweets[0].retweet is True
    assert movie.tweets[0].coordinates is None
