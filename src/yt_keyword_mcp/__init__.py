"""Locate the first spoken occurrence of a keyword in a YouTube video."""
