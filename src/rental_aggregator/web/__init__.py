"""JSON API for the rental aggregator."""
