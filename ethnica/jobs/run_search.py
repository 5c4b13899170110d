"""CLI job to run a business search (or a details lookup) and print it as JSON."""

import argparse
import json
import logging
import sys
from typing import List, Optional

from ethnica.core.config import get_settings
from ethnica.search.orchestrator import SearchOrchestrator, build_orchestrator

logger = logging.getLogger(__name__)


def run_search_job(
    *,
    lng: float,
    lat: float,
    query: Optional[str],
    radius: int,
    limit: int,
    orchestrator: Optional[SearchOrchestrator] = None,
) -> dict:
    orchestrator = orchestrator or build_orchestrator()
    outcome = orchestrator.search([lng, lat], query=query, radius_meters=radius, limit=limit)
    for notice in outcome.notices:
        logger.warning("[%s] %s", notice.level, notice.message)
    logger.info("Completed search: source=%s businesses=%d", outcome.source, len(outcome.businesses))
    return outcome.to_dict()


def run_details_job(place_id: str, orchestrator: Optional[SearchOrchestrator] = None) -> Optional[dict]:
    orchestrator = orchestrator or build_orchestrator()
    business = orchestrator.get_details(place_id)
    if business is None:
        logger.warning("No business found for place_id=%s", place_id)
        return None
    return business.to_dict()


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Search local businesses around a coordinate")
    parser.add_argument("--lng", type=float, default=settings.default_center_lng, help="Center longitude")
    parser.add_argument("--lat", type=float, default=settings.default_center_lat, help="Center latitude")
    parser.add_argument("--query", dest="query", help="Free-text keyword, e.g. 'bakery'")
    parser.add_argument("--radius", type=int, default=5000, help="Search radius in meters")
    parser.add_argument("--limit", type=int, default=settings.search_result_limit, help="Maximum number of businesses")
    parser.add_argument("--details", dest="place_id", help="Fetch details for a place id instead of searching")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    args = build_parser().parse_args(argv)

    if args.place_id:
        result = run_details_job(args.place_id)
        if result is None:
            return 1
    else:
        try:
            result = run_search_job(
                lng=args.lng,
                lat=args.lat,
                query=args.query,
                radius=args.radius,
                limit=args.limit,
            )
        except ValueError as exc:
            logger.error("Invalid search: %s", exc)
            return 2

    json.dump(result, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
