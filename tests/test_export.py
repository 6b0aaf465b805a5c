"""
Tests for JSON export, plotly rendering and the command-line runner.
"""
import json
import math
import pytest

import plotly.graph_objects as go

from retrograde_sim.analysis.cursor import EM_DASH
from retrograde_sim.physics.orbit import OrbitalElements
from retrograde_sim.scripts.retrograde_run import build_parser, main
from retrograde_sim.simulation.engine import compute_series
from retrograde_sim.visualization.export_log import (
    export_results_payload,
    export_series_to_json,
    results_payload,
    series_to_dict,
)
from retrograde_sim.visualization.plotly_viewer import (
    build_longitude_figure,
    build_orbit_figure,
    build_sky_strip_figure,
    render_longitude_plot,
    render_orbit_view,
    render_sky_strip,
)


@pytest.fixture(scope="module")
def earth_mars():
    return compute_series("Earth", "Mars", 0.0, 24)


class TestExportSeries:
    def test_series_to_dict_shape(self, earth_mars):
        data = series_to_dict(earth_mars)
        assert data["observer"] == "Earth"
        assert data["target"] == "Mars"
        n = len(data["times_day"])
        assert len(data["lambda_wrapped_deg"]) == n
        assert len(data["lambda_unwrapped_deg"]) == n
        assert len(data["dlambda_dt_deg_per_day"]) == n
        assert data["stationary_days"] == earth_mars.stationary_days
        assert data["retrograde_intervals"][0] == {
            "start_day": earth_mars.retrograde_intervals[0].start_day,
            "end_day": earth_mars.retrograde_intervals[0].end_day,
        }

    def test_nan_samples_become_null(self):
        series = compute_series(OrbitalElements(1.0, 1.0, 0.0, 0.0), "Mars", 0.0, 1)
        data = series_to_dict(series)
        assert all(v is None for v in data["lambda_wrapped_deg"])

    def test_export_writes_json(self, earth_mars, tmp_path):
        out = tmp_path / "nested" / "series.json"
        path = export_series_to_json(earth_mars, str(out))
        assert path == str(out)
        with open(out, encoding="utf-8") as f:
            data = json.load(f)
        assert data["dt_internal_day"] == 0.25
        assert len(data["retrograde_intervals"]) == len(earth_mars.retrograde_intervals)

    def test_non_finite_window_exports_null(self, tmp_path):
        series = compute_series("Earth", "Mars", math.nan, 2)
        out = tmp_path / "series.json"
        export_series_to_json(series, str(out))
        text = out.read_text(encoding="utf-8")
        assert "NaN" not in text
        data = json.loads(text)
        assert data["window_start_day"] is None
        assert data["window_end_day"] is None
        assert data["t0_day"] == 0.0
        assert data["times_day"] == []


class TestResultsPayload:
    def test_payload_rows(self, earth_mars):
        iv = earth_mars.retrograde_intervals[0]
        payload = results_payload(earth_mars, iv.midpoint_day)
        assert payload["version"] == 1
        readouts = {row["name"]: row["value"] for row in payload["readouts"]}
        assert readouts["State"] == "Retrograde"
        assert readouts["Nearest retrograde bounds (day)"] == f"{iv.start_day:.1f} to {iv.end_day:.1f}"
        params = {row["name"]: row["value"] for row in payload["parameters"]}
        assert params["Observer"] == "Earth"
        assert params["Internal step (day)"] == "0.25"
        assert len(payload["notes"]) == 3

    def test_active_duration_row(self, earth_mars):
        iv = earth_mars.retrograde_intervals[0]
        inside = {r["name"]: r["value"] for r in results_payload(earth_mars, iv.midpoint_day)["readouts"]}
        assert inside["Retrograde duration at cursor (day)"] == f"{iv.duration_day:.1f}"
        outside = {r["name"]: r["value"] for r in results_payload(earth_mars, 0.0)["readouts"]}
        assert outside["Retrograde duration at cursor (day)"] == EM_DASH

    def test_nan_cursor_payload(self, earth_mars):
        readouts = {r["name"]: r["value"] for r in results_payload(earth_mars, math.nan)["readouts"]}
        assert readouts["Current day (day)"] == EM_DASH
        assert readouts["State"] == EM_DASH
        assert readouts["Nearest retrograde bounds (day)"] == EM_DASH

    def test_export_payload(self, earth_mars, tmp_path):
        out = tmp_path / "results.json"
        export_results_payload(earth_mars, 0.0, str(out))
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["version"] == 1


class TestPlotlyViewer:
    def test_longitude_figure(self, earth_mars):
        fig = build_longitude_figure(earth_mars)
        assert isinstance(fig, go.Figure)
        assert len(fig.data) == 2
        assert len(fig.layout.shapes) >= len(earth_mars.retrograde_intervals) + len(earth_mars.stationary_days)

    def test_orbit_figure(self, earth_mars):
        fig = build_orbit_figure(earth_mars, cursor_day=100.0)
        # Sun, two orbits, two bodies, line of sight
        assert len(fig.data) == 6
        assert "100.0" in fig.layout.title.text
        # zodiac ring
        assert len(fig.layout.annotations) == 12
        assert "AU" in fig.data[5].name

    def test_orbit_figure_nan_cursor(self, earth_mars):
        fig = build_orbit_figure(earth_mars, cursor_day=math.nan)
        assert EM_DASH in fig.layout.title.text

    def test_sky_strip_figure(self, earth_mars):
        fig = build_sky_strip_figure(earth_mars, cursor_day=200.0)
        assert len(fig.data) == 2
        assert [a.text for a in fig.layout.annotations][0] == "Ari"
        assert len(fig.layout.annotations) == 12
        xs = fig.data[0].x
        for a, b in zip(xs, xs[1:]):
            if a is not None and b is not None:
                assert abs(b - a) <= 180.0
        assert fig.data[1].y[0] == 200.0

    def test_render_writes_html(self, earth_mars, tmp_path):
        plot = render_longitude_plot(earth_mars, str(tmp_path / "plot.html"))
        orbit = render_orbit_view(earth_mars, 50.0, str(tmp_path / "orbit.html"))
        sky = render_sky_strip(earth_mars, 50.0, str(tmp_path / "sky.html"))
        assert sky.endswith("sky.html")
        assert (tmp_path / "plot.html").exists()
        assert (tmp_path / "orbit.html").exists()
        assert plot.endswith("plot.html") and orbit.endswith("orbit.html")


class TestCli:
    def test_parser_defaults(self):
        args = build_parser().parse_args([])
        assert args.observer == "Earth"
        assert args.target == "Mars"
        assert args.months == 24.0

    def test_unknown_planet_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--target", "Pluto"])

    def test_main_prints_and_exports(self, tmp_path, capsys):
        out = tmp_path / "series.json"
        rc = main(["--observer", "Earth", "--target", "Mars", "--months", "24", "--json", str(out)])
        assert rc == 0
        assert out.exists()
        text = capsys.readouterr().out
        assert "Stationary days:" in text
        assert "Retrograde intervals:" in text

    def test_main_resets_same_pair(self, capsys):
        rc = main(["--observer", "Earth", "--target", "Earth", "--months", "6"])
        assert rc == 0
        assert "Earth -> Venus" in capsys.readouterr().out

    def test_main_rejects_bad_window(self):
        with pytest.raises(SystemExit, match="Invalid scenario"):
            main(["--months", "0"])

    def test_main_nan_cursor_does_not_crash(self, tmp_path):
        out = tmp_path / "results.json"
        rc = main(["--months", "2", "--cursor-day", "nan", "--results-json", str(out)])
        assert rc == 0
        data = json.loads(out.read_text(encoding="utf-8"))
        readouts = {r["name"]: r["value"] for r in data["readouts"]}
        assert readouts["Current day (day)"] == EM_DASH

    def test_main_preset_overrides_pair(self, tmp_path, capsys):
        rc = main(["--preset", "earth-jupiter", "--target", "Venus", "--months", "3",
                   "--sky-html", str(tmp_path / "sky.html")])
        assert rc == 0
        assert "Earth -> Jupiter" in capsys.readouterr().out
        assert (tmp_path / "sky.html").exists()

    def test_unknown_preset_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--preset", "earth-pluto"])
