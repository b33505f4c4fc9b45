"""Protean Engine runner for TutorLink domains.

Starts Engine workers that process events asynchronously:
- OutboxProcessor: claims outbox rows, publishes events to Redis Streams,
  retries failed publishes with backoff and abandons them after the last try
- StreamSubscriptions: read Redis Streams and invoke the event handlers
  (Reviews on ``tutoring::session``, Tutors on ``reviews::review``)

Usage:
    python src/worker.py                    # Run every domain engine
    python src/worker.py --domain reviews   # Run only the reviews engine
"""

import argparse
import multiprocessing

import structlog
from protean.server.engine import Engine

logger = structlog.get_logger(__name__)

DOMAIN_NAMES = ["tutoring", "reviews", "tutors"]


def _get_domain(name):
    """Import and initialize a domain by name."""
    if name == "tutoring":
        from tutoring.domain import tutoring

        tutoring.init()
        return tutoring
    elif name == "reviews":
        from reviews.domain import reviews

        reviews.init()
        return reviews
    elif name == "tutors":
        from tutors.domain import tutors

        tutors.init()
        return tutors
    else:
        raise ValueError(f"Unknown domain: {name}")


def run(name):
    """Run one domain's Engine until it receives a shutdown signal."""
    domain = _get_domain(name)
    logger.info("engine_starting", domain=name)
    Engine(domain).run()


def main():
    parser = argparse.ArgumentParser(description="TutorLink Engine runner")
    parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        help="Run a single domain engine (default: run all)",
    )
    args = parser.parse_args()

    if args.domain:
        run(args.domain)
        return

    # The Engine installs signal handlers, so each one gets its own main thread.
    processes = [multiprocessing.Process(target=run, args=(name,), name=f"engine-{name}") for name in DOMAIN_NAMES]
    for process in processes:
        process.start()
    for process in processes:
        process.join()


if __name__ == "__main__":
    main()
