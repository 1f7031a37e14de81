"""Persistence and serialization for the tracker document."""
