"""Domain models for speedread-cli."""
