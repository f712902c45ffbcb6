"""
Slug generation for new notes.

Slugs look like ``note-1718000000123456789-3fa9c2e1``: the creation time in
nanoseconds followed by a random hex token, so two notes created in the same
clock tick still get distinct slugs. Stores also enforce uniqueness and ask
for a fresh slug on conflict.
"""

import secrets
import time

SLUG_PREFIX = "note"
TOKEN_BYTES = 4


class SlugConflict(Exception):
    """A generated slug is already taken; the insert should retry."""

    def __init__(self, slug: str):
        super().__init__(f"slug '{slug}' already exists")
        self.slug = slug


def generate_slug() -> str:
    return f"{SLUG_PREFIX}-{time.time_ns()}-{secrets.token_hex(TOKEN_BYTES)}"
