"""Pydantic v2 models for the event catalog consumed by showrec.

All models use frozen config: catalog entries are immutable snapshots
supplied by the listing backend and are never edited here.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Show(BaseModel):
    """A single live show as it appears in a day's listing.

    The same model represents favourites: a favourite is a show the user
    saved, optionally with the day header it was listed under.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    artist: str
    venue: str
    address: str = ""
    # Listing time as printed, e.g. "8:00 pm" or "[10:00pm]".
    time: str | None = None
    event_link: str | None = Field(default=None, alias="eventLink")
    venue_link: str | None = Field(default=None, alias="venueLink")
    map_link: str | None = Field(default=None, alias="mapLink")
    # Only favourites carry this; catalog shows get theirs from EventDay.
    event_date: str | None = Field(default=None, alias="eventDate")

    @property
    def identity(self) -> tuple[str, str, str]:
        """(artist, venue, time) triple used to tell shows apart."""
        return (self.artist, self.venue, self.time or "")


class EventDay(BaseModel):
    """One day of the catalog: a date header and the shows listed under it."""

    model_config = ConfigDict(frozen=True)

    date: str
    shows: list[Show] = Field(default_factory=list)
