"""
Utility modules for CineTweet.

Cross-cutting concerns:
- Errors: Error types raised by the data-access layer
- Limits: Result-limit parsing and the non-positive-means-unlimited policy
"""
