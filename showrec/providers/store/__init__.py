"""Recommendation persistence providers.

SQLiteRecommendationStore keeps the last computed list and the profile it
came from in data/recommendations.db, so a restarted host can show
recommendations immediately while a fresh pass runs.
"""
