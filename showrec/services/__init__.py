"""Recommendation services: profiles, features, genre and embedding signals,
explanations, and the blending engine that ties them together."""
