"""Hashing utilities."""

import hashlib


def generate_article_id(canonical_url: str) -> str:
    """Generate a stable article ID from its canonical URL."""
    return hashlib.sha256(canonical_url.strip().lower().encode()).hexdigest()[:16]
