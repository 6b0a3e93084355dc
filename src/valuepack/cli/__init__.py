"""Command line interface for valuepack."""
