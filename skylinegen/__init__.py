"""Fetch GitHub contribution calendars and write them as 3D-printable STL skylines."""

__version__ = "0.1.0"