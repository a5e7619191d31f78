"""Command-line front end for the guidelint engine."""
