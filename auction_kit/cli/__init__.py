"""Command line interface for auction-kit."""
