"""OAuth credential handling."""
