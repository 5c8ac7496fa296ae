"""baselinekit: keep a local copy of a canonical document baseline in sync."""

__version__ = "0.3.0"
