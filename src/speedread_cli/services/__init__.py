"""Service layer for speedread-cli."""
