"""
Job Search - CLI Entry Point.

Runs searches through the same cache and fallback cascade as the API.
"""

import logging
import sys

from dotenv import load_dotenv

load_dotenv()

from jobsearch.config import settings
from jobsearch.db import init_db
from jobsearch.db.query_store import STORE_ERRORS
from jobsearch.models import SearchRequest, SearchResponse
from jobsearch.search import SearchOrchestrator, classify, status_alert


def print_response(response: SearchResponse) -> None:
    """Print a status banner and a short job list."""
    result = classify(response)
    alert = status_alert(result)
    if alert:
        print(f"[{alert.tone}] {alert.title}")
        print(f"        {alert.message}")

    print(f"{len(response.data)} jobs ({result.fallback_level})")
    for job in response.data:
        place = ", ".join(p for p in (job.job_city, job.job_state, job.job_country) if p)
        print(f"  - {job.job_title} @ {job.employer_name}" + (f" ({place})" if place else ""))


def print_stats(orchestrator: SearchOrchestrator) -> None:
    """Print cache sizes and key health, or a warning when the store is down."""
    try:
        stats = orchestrator.query_store.stats()
        recent = orchestrator.global_store.count()
        keys = orchestrator.key_health.summary() if orchestrator.key_health else []
    except STORE_ERRORS as e:
        print(f"Cache stats unavailable: {e}")
        return

    print(f"Cached searches: {stats['entries']} ({stats['fresh_entries']} fresh)")
    print(f"Recent successful searches: {recent}")
    for key in keys:
        state = "healthy" if key["healthy"] else "unhealthy"
        print(f"Key {key['key_name']}: {state}, {key['total_requests_today']} requests today")


def main():
    """Run the job search CLI."""
    logging.basicConfig(level=settings.log_level.upper())
    print("Job Search")
    print("=" * 40)

    try:
        init_db()
    except ValueError:
        print("Warning: DATABASE_URL not set, searches will not be cached")

    orchestrator = SearchOrchestrator.from_settings()

    # One-shot search from arguments
    if len(sys.argv) > 1:
        print_response(orchestrator.search(SearchRequest(query=" ".join(sys.argv[1:]))))
        return

    location = ""
    remote = True

    print("Commands: /quit, /location <place>, /remote, /onsite, /stats, /purge")
    print("-" * 40)

    while True:
        try:
            user_input = input("Search: ").strip()
            if not user_input:
                continue

            if user_input.lower() == "/quit":
                break

            if user_input.startswith("/location"):
                location = user_input[len("/location"):].strip()
                print(f"Location: {location or 'any'}")
                continue

            if user_input in ("/remote", "/onsite"):
                remote = user_input == "/remote"
                print(f"Remote only: {remote}")
                continue

            if user_input == "/stats":
                print_stats(orchestrator)
                continue

            if user_input == "/purge":
                removed = orchestrator.query_store.purge_expired()
                print(f"Removed {removed} expired entries")
                continue

            request = SearchRequest(query=user_input, location=location, remote=remote)
            print_response(orchestrator.search(request))
            print()

        except KeyboardInterrupt:
            break

    print("Goodbye!")


if __name__ == "__main__":
    main()
