"""
Rental Aggregator - unified feed of rental listings from Groningen agencies.

Scrapes agency websites concurrently, normalizes prices, rooms, sizes and
Dutch listing dates, deduplicates and ranks listings by freshness, caches the
result for ten minutes and reports newly appeared listings to a notifier.
"""

__version__ = "0.1.0"
