"""Scrape a movie listing site through a relay and reconcile against a local dataset."""

__version__ = "1.0.0"
