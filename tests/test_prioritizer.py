import pytest

from skyview.services.prioritizer import (
    Prioritizer,
    budget_for_zoom,
    is_commercial_callsign,
    score_aircraft,
)


@pytest.mark.parametrize(
    "zoom, budget",
    [(2, 200), (4, 200), (5, 500), (6, 500), (7, 1000), (8, 1000), (10, 2000), (11, 5000), (15, 5000)],
)
def test_budget_table(zoom, budget):
    assert budget_for_zoom(zoom) == budget


def test_budget_is_non_decreasing_with_zoom():
    budgets = [budget_for_zoom(z) for z in range(0, 20)]
    assert budgets == sorted(budgets)


@pytest.mark.parametrize(
    "callsign, expected",
    [
        ("BAW123", True),
        ("UAL9", True),
        ("  DAL45  ", True),
        ("N123AB", False),
        ("baw123", False),
        ("ABCD1", False),
        ("", False),
        (None, False),
    ],
)
def test_commercial_callsign_pattern(callsign, expected):
    assert is_commercial_callsign(callsign) is expected


def test_under_budget_returns_input_unchanged(make_aircraft, now):
    aircraft = [make_aircraft(baro_altitude=float(i)) for i in range(120)]

    selected = Prioritizer().select(aircraft, zoom=4, now=now)

    assert selected == aircraft


def test_over_budget_keeps_highest_scores(make_aircraft, now):
    airline = [make_aircraft(callsign=f"AAL{i}") for i in range(200)]
    general = [make_aircraft(callsign=f"N{i}AB", baro_altitude=12000.0) for i in range(400)]
    mixed = []
    for i in range(200):
        mixed.extend([general[2 * i], airline[i], general[2 * i + 1]])

    selected = Prioritizer().select(mixed, zoom=4, now=now)

    assert len(selected) == 200
    assert {a.icao24 for a in selected} == {a.icao24 for a in airline}


@pytest.mark.parametrize("zoom", [2, 4, 6, 8, 10, 12])
def test_output_never_exceeds_budget(make_aircraft, now, zoom):
    aircraft = [make_aircraft() for _ in range(2500)]

    assert len(Prioritizer().select(aircraft, zoom, now=now)) <= budget_for_zoom(zoom)


def test_equal_scores_keep_input_order(make_aircraft, now):
    aircraft = [make_aircraft() for _ in range(300)]

    selected = Prioritizer().select(aircraft, zoom=4, now=now)

    assert selected == aircraft[:200]


def test_score_components(make_aircraft, now):
    base = make_aircraft(last_contact=now - 100)
    assert score_aircraft(base, now) == 0

    full = make_aircraft(
        callsign="KLM601", baro_altitude=80000.0, velocity=900.0, last_contact=now
    )
    assert score_aircraft(full, now) == pytest.approx(100 + 50 + 30 + 20)

    partial = make_aircraft(baro_altitude=10500.0, velocity=120.0, last_contact=now - 5)
    assert score_aircraft(partial, now) == pytest.approx(10.5 + 12 + 15)


def test_score_is_monotone_in_each_field(make_aircraft, now):
    for field, values in (
        ("baro_altitude", [0.0, 1000.0, 20000.0, 60000.0, 90000.0]),
        ("velocity", [0.0, 50.0, 250.0, 400.0]),
        ("last_contact", [now - 60, now - 15, now - 5, now]),
    ):
        scores = [score_aircraft(make_aircraft(**{field: v}), now) for v in values]
        assert scores == sorted(scores), field


def test_commercial_label_strictly_increases_score(make_aircraft, now):
    plain = make_aircraft(callsign="N12345", baro_altitude=9000.0, velocity=200.0)
    airline = make_aircraft(callsign="SWA12", baro_altitude=9000.0, velocity=200.0)

    assert score_aircraft(airline, now) == score_aircraft(plain, now) + 100
