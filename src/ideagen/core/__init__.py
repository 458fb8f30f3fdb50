"""Core primitives shared by every ideagen package."""
