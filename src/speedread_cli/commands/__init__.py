"""Command modules for speedread-cli."""
