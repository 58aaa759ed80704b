"""Utility helpers for the hot search service."""
