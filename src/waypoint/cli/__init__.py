"""Command-line interface for Waypoint."""
