"""ShortShift: compose, schedule and upload YouTube Shorts."""

__version__ = "0.1.0"
