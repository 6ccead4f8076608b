"""Stripe checkout relay with Firestore order persistence."""

__version__ = "0.1.0"
