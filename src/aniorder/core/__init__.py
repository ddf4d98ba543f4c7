"""Traversal engine and presentation helpers."""
