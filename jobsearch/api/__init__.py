"""HTTP API for the job search service."""
