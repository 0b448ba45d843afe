"""Candidate Tracker: hiring pipeline candidate records API."""

__version__ = "0.1.0"
