"""Protean Engine runner for the Blom admin domains.

Starts Engine workers that process events asynchronously:
- OutboxProcessor: polls the outbox table and publishes events to the broker
- StreamSubscriptions: read the broker, invoke projectors and event handlers

Catalogue's engine is the one that deducts stock for paid orders, so it must
run wherever orders are marked paid.

Usage:
    python src/server.py                     # Run every domain engine
    python src/server.py --domain catalogue  # Run only the catalogue engine
"""

import argparse
import asyncio

from protean.server.engine import Engine

DOMAIN_NAMES = ["ordering", "catalogue", "promotions", "contacts", "courses", "finance"]


def _get_domain(name):
    """Import and initialize a domain by name."""
    if name == "ordering":
        from ordering.domain import ordering as domain
    elif name == "catalogue":
        from catalogue.domain import catalogue as domain
    elif name == "promotions":
        from promotions.domain import promotions as domain
    elif name == "contacts":
        from contacts.domain import contacts as domain
    elif name == "courses":
        from courses.domain import courses as domain
    elif name == "finance":
        from finance.domain import finance as domain
    else:
        raise ValueError(f"Unknown domain: {name}")

    domain.init()
    return domain


async def run(domain_names):
    engines = [Engine(_get_domain(name)) for name in domain_names]
    await asyncio.gather(*(engine.run() for engine in engines))


def main():
    parser = argparse.ArgumentParser(description="Blom admin Engine runner")
    parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        help="Run a single domain engine (default: run all)",
    )
    args = parser.parse_args()

    from shared.utils.logging import configure_logging

    configure_logging(log_file_prefix="blom_engine")

    domain_names = [args.domain] if args.domain else DOMAIN_NAMES

    asyncio.run(run(domain_names))


if __name__ == "__main__":
    main()
