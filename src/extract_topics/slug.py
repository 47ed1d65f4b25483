"""Topic slug helpers."""

import re

MAX_SLUG_LENGTH = 96


def slugify_topic(value: str) -> str:
    slug = value.lower().replace("&", " and ")
    slug = re.sub(r"[^a-z0-9]+", "-", slug).strip("-")
    return slug[:MAX_SLUG_LENGTH]


def normalize_topic_key(value: str) -> str:
    return value.strip().lower()
