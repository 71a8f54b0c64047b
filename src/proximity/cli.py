"""
Proximity CLI entrypoint.

This CLI is intended for quick local checks against a provider catalog.
It delegates all ranking logic to `proximity.ranking.rank`.
"""

from __future__ import annotations

import argparse
import json
from typing import Any

from proximity.catalog.loader import load_providers
from proximity.config.settings import get_settings
from proximity.core.geo import distance_km
from proximity.core.logging import configure_logging
from proximity.domain.models import RankingResult, Seeker
from proximity.ranking.explain import one_line_summary
from proximity.ranking.rank import build_provider_index, nearby_providers, rank_providers


def _degrees(limit: float, label: str):
    def parse(value: str) -> float:
        try:
            number = float(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f"invalid {label}: {value!r}") from None
        if not -limit <= number <= limit:
            raise argparse.ArgumentTypeError(f"{label} {number} out of range [-{limit:g}, {limit:g}]")
        return number

    return parse


_latitude = _degrees(90, "latitude")
_longitude = _degrees(180, "longitude")


def _origin(args: argparse.Namespace) -> Seeker:
    return Seeker(id="cli", latitude=float(args.origin_lat), longitude=float(args.origin_lon))


def _print_result(result: RankingResult, *, as_json: bool) -> None:
    if as_json:
        print(json.dumps(result.model_dump(mode="json"), ensure_ascii=False, indent=2))
        return
    print(f"Generated at: {result.generated_at.isoformat()}")
    if not result.results:
        print("No providers found.")
    for i, item in enumerate(result.results, start=1):
        print(f"{i:>2}. {one_line_summary(item)}")


def _cmd_distance(args: argparse.Namespace) -> int:
    print(f"{distance_km(args.lat1, args.lon1, args.lat2, args.lon2):.2f}")
    return 0


def _cmd_rank(args: argparse.Namespace) -> int:
    """Handle the `rank` subcommand."""
    settings = get_settings()
    providers = load_providers(args.catalog or settings.catalog.path)
    result = rank_providers(
        _origin(args),
        providers,
        radius_km=args.radius_km,
        max_results=args.max_results,
        service=args.service,
        settings=settings,
    )
    _print_result(result, as_json=args.json)
    return 0


def _cmd_nearby(args: argparse.Namespace) -> int:
    settings = get_settings()
    providers = load_providers(args.catalog or settings.catalog.path)
    index = build_provider_index(providers, settings)
    result = nearby_providers(
        _origin(args),
        index,
        radius_km=float(args.radius_km),
        max_results=args.max_results,
        settings=settings,
    )
    _print_result(result, as_json=args.json)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the Proximity CLI."""
    parser = argparse.ArgumentParser(prog="proximity")
    parser.add_argument("--log-level", default=None, help="Override app.log_level (e.g. DEBUG)")
    sub = parser.add_subparsers(dest="command", required=True)

    dist = sub.add_parser("distance", help="Great-circle distance in km between two points.")
    dist.add_argument("lat1", type=_latitude)
    dist.add_argument("lon1", type=_longitude)
    dist.add_argument("lat2", type=_latitude)
    dist.add_argument("lon2", type=_longitude)
    dist.set_defaults(func=_cmd_distance)

    rank = sub.add_parser("rank", help="Rank catalog providers by distance from an origin.")
    rank.add_argument("--origin-lat", required=True, type=_latitude)
    rank.add_argument("--origin-lon", required=True, type=_longitude)
    rank.add_argument("--catalog", type=str, default=None, help="Provider catalog JSON (defaults to settings)")
    rank.add_argument("--radius-km", type=float, default=None)
    rank.add_argument("--max-results", type=int, default=None)
    rank.add_argument("--service", type=str, default=None, help="Only providers offering this service")
    rank.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    rank.set_defaults(func=_cmd_rank)

    near = sub.add_parser("nearby", help="Providers within a radius (spatial index query).")
    near.add_argument("--origin-lat", required=True, type=_latitude)
    near.add_argument("--origin-lon", required=True, type=_longitude)
    near.add_argument("--radius-km", required=True, type=float)
    near.add_argument("--catalog", type=str, default=None)
    near.add_argument("--max-results", type=int, default=None)
    near.add_argument("--json", action="store_true")
    near.set_defaults(func=_cmd_nearby)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m proximity.cli`."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
