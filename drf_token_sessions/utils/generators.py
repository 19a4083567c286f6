"""Utility functions for generating unique identifiers across the application.

Functions in this module are wrapped to provide a stable interface for token
claims and database columns, allowing logic changes (e.g., switching UUID
versions) without touching the issuer or the schema.
"""

import uuid6


def generate_unique_id() -> str:
    """Generates a time-ordered UUID v7 hex string for the ``jti`` claim.

    UUID v7 keeps the unique index on refresh sessions append-mostly while
    still carrying 74 random bits per identifier.
    """
    return uuid6.uuid7().hex
