"""Description embedding providers.

Each (artist, venue) pair gets a short generated description on the
backend, which is embedded into a vector.  Those vectors feed the
two-tower similarity score.
"""
