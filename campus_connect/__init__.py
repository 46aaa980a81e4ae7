"""Campus Connect: events, comments and realtime chat for a campus community."""

__version__ = "0.1.0"
