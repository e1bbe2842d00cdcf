"""Protean Engine runner for the bakery domains.

Only needed when PROTEAN_ENV=production switches event processing to async.
Each domain gets an Engine that drains its outbox into Redis Streams and
feeds subscribed event handlers, the order feed publisher among them.

Usage:
    python src/server.py                    # ordering and catalogue
    python src/server.py --domain ordering
"""

import argparse
import asyncio
import importlib

import structlog
from protean.server.engine import Engine

from shared.logging import configure_logging

logger = structlog.get_logger(__name__)

DOMAINS = {
    "ordering": "ordering.domain",
    "catalogue": "catalogue.domain",
}


def load_domain(name):
    """Import a domain module by name and initialize the domain it defines."""
    if name not in DOMAINS:
        raise ValueError(f"Unknown domain: {name}")

    domain = getattr(importlib.import_module(DOMAINS[name]), name)
    domain.init()
    return domain


async def run(names):
    engines = [Engine(load_domain(name)) for name in names]
    logger.info("engines_starting", domains=names)
    await asyncio.gather(*(engine.run() for engine in engines))


def main():
    parser = argparse.ArgumentParser(description="Tarsi Sweet event engines")
    parser.add_argument("--domain", choices=sorted(DOMAINS), help="Run one domain's engine (default: all)")
    args = parser.parse_args()

    configure_logging()
    asyncio.run(run([args.domain] if args.domain else list(DOMAINS)))


if __name__ == "__main__":
    main()
