"""YouTube upload API."""
