"""Command line interface for ccportal."""
