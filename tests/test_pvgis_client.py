import unittest
from dataclasses import replace
from unittest import mock

import requests

from estimator.assumptions import default_assumptions
from pvgis import PvgisClient, PvgisError, PvgisQuery, TTLCache, build_params, parse_monthly_yield, validate_query


def _payload(months=12, kwh=1500.0):
    return {
        "outputs": {
            "monthly": {"fixed": [{"month": m, "E_m": kwh + m} for m in range(months, 0, -1)]},
            "totals": {"fixed": {"E_y": kwh * 12 + 78}},
        }
    }


def _response(payload=None, status=200):
    resp = mock.Mock()
    resp.status_code = status
    resp.json.return_value = payload if payload is not None else _payload()
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status}", response=resp)
    return resp


QUERY = PvgisQuery(lat=24.7136, lon=46.6753, peakpower=21.6, loss=18.3, angle=22.0, aspect=0.0)


class TestParams(unittest.TestCase):
    def setUp(self):
        self.s = default_assumptions().pvgis

    def test_fixed_angles(self):
        p = build_params(QUERY, self.s)
        self.assertEqual(22.0, p["angle"])
        self.assertEqual(0.0, p["aspect"])
        self.assertEqual("json", p["outputformat"])
        self.assertNotIn("optimalangles", p)

    def test_optimal_angles(self):
        p = build_params(replace(QUERY, optimal_angles=True), self.s)
        self.assertEqual(1, p["optimalangles"])
        self.assertNotIn("angle", p)
        self.assertNotIn("aspect", p)

    def test_optimal_inclination_keeps_aspect(self):
        p = build_params(replace(QUERY, optimal_inclination=True, aspect=-45.0), self.s)
        self.assertEqual(1, p["optimalinclination"])
        self.assertEqual(-45.0, p["aspect"])
        self.assertNotIn("angle", p)

    def test_bounds(self):
        validate_query(QUERY, self.s)
        for bad in (
            replace(QUERY, lat=40.0),
            replace(QUERY, lon=20.0),
            replace(QUERY, peakpower=0.1),
            replace(QUERY, loss=60.0),
            replace(QUERY, angle=50.0),
            replace(QUERY, aspect=200.0),
        ):
            with self.assertRaises(PvgisError) as cm:
                validate_query(bad, self.s)
            self.assertEqual(400, cm.exception.status)


class TestParse(unittest.TestCase):
    def test_months_sorted(self):
        y = parse_monthly_yield(_payload())
        self.assertEqual(12, len(y.monthly_kwh))
        self.assertEqual(1501.0, y.monthly_kwh[0])
        self.assertEqual(1512.0, y.monthly_kwh[11])
        self.assertEqual(18078.0, y.annual_kwh)

    def test_wrong_month_count(self):
        with self.assertRaises(PvgisError):
            parse_monthly_yield(_payload(months=11))

    def test_malformed(self):
        with self.assertRaises(PvgisError):
            parse_monthly_yield({"outputs": {}})


class TestClient(unittest.TestCase):
    def setUp(self):
        self.s = default_assumptions().pvgis
        self.session = mock.Mock()

    def test_fetch_and_cache(self):
        self.session.get.return_value = _response()
        c = PvgisClient(self.s, session=self.session, cache=TTLCache(60))

        first = c.fetch(QUERY)
        second = c.fetch(QUERY)

        self.assertEqual(first, second)
        self.assertEqual(1, self.session.get.call_count)
        _, kwargs = self.session.get.call_args
        self.assertEqual(self.s.request_timeout_seconds, kwargs["timeout"])
        self.assertEqual(21.6, kwargs["params"]["peakpower"])
        self.assertEqual(1, c.cache.stats()["hits"])

    def test_default_cache_is_bounded(self):
        c = PvgisClient(self.s, session=self.session)
        self.assertEqual(self.s.cache_max_entries, c.cache.max_entries)
        self.assertEqual(self.s.cache_ttl_seconds, c.cache.ttl_seconds)

    def test_out_of_bounds_never_calls_api(self):
        c = PvgisClient(self.s, session=self.session)
        with self.assertRaises(PvgisError):
            c.fetch(replace(QUERY, lat=10.0))
        self.session.get.assert_not_called()

    def test_http_error_status(self):
        self.session.get.return_value = _response(status=503)
        c = PvgisClient(self.s, session=self.session)
        with self.assertRaises(PvgisError) as cm:
            c.fetch(QUERY)
        self.assertEqual(503, cm.exception.status)
        self.assertEqual(0, len(c.cache))

    def test_network_error(self):
        self.session.get.side_effect = requests.ConnectionError("down")
        c = PvgisClient(self.s, session=self.session)
        with self.assertRaises(PvgisError) as cm:
            c.fetch(QUERY)
        self.assertIsNone(cm.exception.status)

    def test_non_json_body(self):
        resp = _response()
        resp.json.side_effect = ValueError("not json")
        self.session.get.return_value = resp
        c = PvgisClient(self.s, session=self.session)
        with self.assertRaises(PvgisError) as cm:
            c.fetch(QUERY)
        self.assertEqual(200, cm.exception.status)


if __name__ == "__main__":
    unittest.main()
