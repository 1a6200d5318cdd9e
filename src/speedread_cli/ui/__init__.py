"""Terminal user interface for the reader."""
