"""Cache providers.

In-memory TTL cache used for artist genre lookups, so the same artist
appearing in favourites and across many catalog days is resolved once.
"""
