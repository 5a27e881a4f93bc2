"""
Job Search Service Backend.

Core components:
- search: Orchestrator with cache and fallback ladder, response classifier
- db: Query cache and last-known-good stores
- tools: JSearch API client
- models: Data models for requests, jobs and responses
"""
