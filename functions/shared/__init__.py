"""Shared domain types for the news functions."""
