"""Design asset ingest service."""
