"""Artist genre providers.

    - HttpGenreProvider   — queries the listing backend's /api/artist-genre.
    - CachedGenreProvider — wraps any genre provider with an ICacheProvider.
"""
