from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from retrograde_sim.objects.planet import planet_keys
from retrograde_sim.simulation.scenario import PRESETS, Scenario, preset_to_config, resolve_distinct_pair
from retrograde_sim.visualization.export_log import export_results_payload, export_series_to_json
from retrograde_sim.visualization.plotly_viewer import render_longitude_plot, render_orbit_view, render_sky_strip

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Find stationary points and retrograde intervals of one planet seen from another.",
    )
    parser.add_argument("--observer", default="Earth", choices=planet_keys(), help="Observing planet.")
    parser.add_argument("--target", default="Mars", choices=planet_keys(), help="Observed planet.")
    parser.add_argument("--preset", default="custom", choices=[*PRESETS, "custom"],
                        help="Named observer/target pair; overrides --observer and --target unless \"custom\".")
    parser.add_argument("--start-day", type=float, default=0.0, help="Window start (model day).")
    parser.add_argument("--months", type=float, default=24.0, help="Window length in 30-day model months.")
    parser.add_argument("--t0-day", type=float, default=0.0, help="Reference epoch of the mean longitudes (model day).")
    parser.add_argument("--cursor-day", type=float, default=None, help="Day used for the results readout and orbit view.")
    parser.add_argument("--json", default=None, help="Optional path for the full series as JSON.")
    parser.add_argument("--results-json", default=None, help="Optional path for the results payload at the cursor day.")
    parser.add_argument("--html", default=None, help="Optional path for the longitude plot (HTML).")
    parser.add_argument("--orbit-html", default=None, help="Optional path for the orbit view (HTML).")
    parser.add_argument("--sky-html", default=None, help="Optional path for the sky-strip view (HTML).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    observer, target = preset_to_config(args.preset) or (args.observer, args.target)
    observer, target, adjusted = resolve_distinct_pair(observer, target)
    if adjusted:
        logger.warning("Observer and target must be different. Target reset to %s.", target)

    try:
        scenario = Scenario.from_catalog(observer, target, args.start_day, args.months, args.t0_day)
    except (KeyError, ValueError) as exc:
        raise SystemExit(f"Invalid scenario: {exc}") from exc

    series = scenario.run()
    cursor_day = series.window_start_day if args.cursor_day is None else args.cursor_day

    print(f"{scenario.name}: days {series.window_start_day:.1f} to {series.window_end_day:.1f}, "
          f"{len(series.times_day)} samples")
    print("Stationary days:")
    for t in series.stationary_days:
        print(f"  day={t:9.3f}")
    print("Retrograde intervals:")
    for iv in series.retrograde_intervals:
        print(f"  start={iv.start_day:9.3f} end={iv.end_day:9.3f} duration={iv.duration_day:7.2f} days")

    if args.json:
        print("Wrote", export_series_to_json(series, args.json))
    if args.results_json:
        print("Wrote", export_results_payload(series, cursor_day, args.results_json))
    if args.html:
        print("Wrote", render_longitude_plot(series, args.html))
    if args.orbit_html:
        print("Wrote", render_orbit_view(series, cursor_day, args.orbit_html))
    if args.sky_html:
        print("Wrote", render_sky_strip(series, cursor_day, args.sky_html))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
