"""
Repositories for CineTweet.

Fixed query shapes over the movies and tweets collections.
"""
