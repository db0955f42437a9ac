"""
Backend package for the news functions API.

This package provides a FastAPI application with database and push-delivery
abstractions that replace the per-function webhook handlers (article
translation, push notifications and retention) with a single service.
"""
