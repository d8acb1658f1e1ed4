"""Data model shared by the contribution fetchers and the mesh builder."""

from dataclasses import dataclass


@dataclass
class Contribution:
    """Activity recorded on one day of the calendar grid."""

    week: int
    day: int
    count: int
    data: str