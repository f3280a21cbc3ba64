"""Bundled post sources."""
