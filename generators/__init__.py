"""Procedural generators for vascular trees."""
