"""Utility modules for speedread-cli."""
