"""CLI job that runs one dashboard search and writes the export to disk."""

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from leads_dashboard.core.config import ConfigError, require_api_base_url
from leads_dashboard.models import ExportResult
from leads_dashboard.views.companies import CompanySearchView
from leads_dashboard.views.profiles import ProfileView
from leads_dashboard.views.restaurants import DEFAULT_LIMIT, RestaurantView

logger = logging.getLogger(__name__)


class JobFailed(RuntimeError):
    """Raised when a view reports an error the CLI cannot recover from."""


def write_export(result: ExportResult, output_dir: Path) -> Path:
    if not result.ok:
        raise JobFailed(result.warning or "export failed")
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / result.filename
    path.write_bytes(result.content)
    logger.info("Wrote %s", path)
    return path


def run_restaurants(*, limit: int, search: Optional[str], fmt: str, output_dir: Path) -> Path:
    view = RestaurantView()
    view.set_limit(limit)
    if view.warning:
        logger.warning("%s", view.warning)
    if not view.fetch():
        raise JobFailed(view.error or "restaurant fetch failed")
    if search:
        view.on_search_input(search)
        view.flush_search()
    logger.info("Restaurants: %d loaded, %d after filter", len(view.data), len(view.filtered))
    result = view.export_xlsx() if fmt == "xlsx" else view.export_csv()
    return write_export(result, output_dir)


def run_companies(*, query: str, location: str, batches: int, output_dir: Path) -> Path:
    view = CompanySearchView()
    view.set_inputs(query=query, location=location)
    state = view.submit()
    while not state.error and state.has_more and state.current_batch < batches:
        state = view.load_more()
    if state.error:
        raise JobFailed(state.error)
    logger.info(
        "Companies: %d collected over %d batches (reported total=%s)",
        len(state.results),
        state.current_batch,
        state.total,
    )
    return write_export(view.export_csv(), output_dir)


def run_profiles(*, csv_path: Path, output_dir: Path) -> Path:
    view = ProfileView()
    result = view.upload(csv_path.read_bytes(), filename=csv_path.name)
    logger.info("%s", result.message)
    if not result.found:
        raise JobFailed(result.message)
    if not view.enrich():
        raise JobFailed(view.message or "profile enrichment failed")
    logger.info("Profiles: %d enriched (reported total=%s)", len(view.profiles), view.total)
    return write_export(view.export_csv(), output_dir)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run a scrape dashboard search and export the results")
    parser.add_argument("--output-dir", dest="output_dir", type=Path, default=Path("."), help="Where to write exports")
    subparsers = parser.add_subparsers(dest="command", required=True)

    restaurants = subparsers.add_parser("restaurants", help="Fetch restaurant listings")
    restaurants.add_argument("--limit", type=int, default=DEFAULT_LIMIT, help="Number of records to fetch")
    restaurants.add_argument("--filter", dest="search", help="Keep rows matching this text")
    restaurants.add_argument("--format", dest="fmt", choices=("csv", "xlsx"), default="csv")

    companies = subparsers.add_parser("companies", help="Search TrustPilot companies")
    companies.add_argument("--query", default="software company", help="Search query")
    companies.add_argument("--location", required=True, help="City, e.g. 'London, UK'")
    companies.add_argument("--batches", type=int, default=1, help="Page windows to load")

    profiles = subparsers.add_parser("profiles", help="Enrich TrustPilot profiles from a CSV")
    profiles.add_argument("csv_path", type=Path, help="CSV file containing TrustPilot URLs")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    args = build_parser().parse_args(argv)

    try:
        require_api_base_url()
        if args.command == "restaurants":
            run_restaurants(limit=args.limit, search=args.search, fmt=args.fmt, output_dir=args.output_dir)
        elif args.command == "companies":
            run_companies(query=args.query, location=args.location, batches=args.batches, output_dir=args.output_dir)
        else:
            run_profiles(csv_path=args.csv_path, output_dir=args.output_dir)
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        return 2
    except (JobFailed, OSError) as exc:
        logger.error("Job failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
