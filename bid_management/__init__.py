"""Bid management service: tenders, assignments, finance requests and AI-assisted bidding."""

__version__ = "0.1.0"
