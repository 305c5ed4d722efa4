"""Command-line interface for the static site builder."""
