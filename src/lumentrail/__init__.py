"""LumenTrail — local-first ingestion, lexical search and provenance."""
