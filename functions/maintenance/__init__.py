"""Scheduled data maintenance jobs."""
