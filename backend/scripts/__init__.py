"""Operational command-line scripts: init, seed, ingest."""
