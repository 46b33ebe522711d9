# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest
from unittest import mock

from api_case import ApiTestCase


def _macros(calories: float, protein: float = 10, carbs: float = 20, fat: float = 5):
    from daily_tracker.meals.models import Macros

    return Macros(calories=calories, protein=protein, carbs=carbs, fat=fat)


class TestMealsApi(ApiTestCase):
    env_overrides = {"FREE_AI_CALCULATIONS": "3"}

    def test_create_list_update_delete(self) -> None:
        client = self.user_client()
        with mock.patch("daily_tracker.meals.api.estimate_macros", return_value=_macros(450)) as estimate:
            resp = client.post(
                "/api/meals",
                json={"description": "Oatmeal with banana", "local_date_time": "2024-03-10T07:30"},
            )
        self.assertEqual(resp.status_code, 200, resp.text)
        meal = resp.json()
        estimate.assert_called_once_with("Oatmeal with banana", None)
        self.assertEqual(meal["kind"], "meal")
        self.assertEqual(meal["local_date_time"], "2024-03-10T07:30:00")
        self.assertEqual(meal["calculated_macros"]["calories"], 450)

        resp = client.get("/api/meals", params={"date": "2024-03-10"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["count"], 1)
        self.assertEqual(resp.json()["totals"]["calories"], 450)
        self.assertEqual(client.get("/api/meals", params={"date": "2024-03-11"}).json()["count"], 0)

        # Time-only change does not re-estimate.
        with mock.patch("daily_tracker.meals.api.estimate_macros") as estimate:
            resp = client.put(
                f"/api/meals/{meal['id']}",
                json={"description": "Oatmeal with banana", "local_date_time": "2024-03-10T08:00"},
            )
            estimate.assert_not_called()
        self.assertEqual(resp.json()["local_date_time"], "2024-03-10T08:00:00")
        self.assertEqual(resp.json()["calculated_macros"]["calories"], 450)

        # Failed re-estimation keeps the previous macros.
        with mock.patch("daily_tracker.meals.api.estimate_macros", return_value=None):
            resp = client.put(
                f"/api/meals/{meal['id']}",
                json={"description": "Oatmeal, banana and honey", "local_date_time": "2024-03-10T08:00"},
            )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["description"], "Oatmeal, banana and honey")
        self.assertEqual(resp.json()["calculated_macros"]["calories"], 450)

        self.assertEqual(client.delete(f"/api/meals/{meal['id']}").status_code, 200)
        self.assertEqual(client.delete(f"/api/meals/{meal['id']}").status_code, 404)

    def test_estimation_failure_saves_null_macros(self) -> None:
        client = self.user_client()
        with mock.patch("daily_tracker.meals.api.estimate_macros", return_value=None):
            resp = client.post("/api/meals", json={"description": "Mystery stew", "local_date_time": "2024-03-10T19:00"})
        self.assertEqual(resp.status_code, 200)
        self.assertIsNone(resp.json()["calculated_macros"])

    def test_malformed_provider_reply_saves_null_macros(self) -> None:
        import httpx

        from daily_tracker.meals import estimator

        real_client = httpx.Client

        def client_factory(**kwargs):
            transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"choices": ["oops"]}))
            return real_client(transport=transport, **kwargs)

        client = self.user_client()
        with mock.patch.object(estimator.settings, "macros_api_key", "test-key"), \
                mock.patch.object(estimator.httpx, "Client", side_effect=client_factory):
            resp = client.post("/api/meals", json={"description": "Toast", "local_date_time": "2024-03-10T08:00"})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertIsNone(resp.json()["calculated_macros"])

    def test_range_listing(self) -> None:
        client = self.user_client()
        with mock.patch("daily_tracker.meals.api.estimate_macros", return_value=_macros(100)):
            for stamp in ("2024-03-09T23:59:59", "2024-03-10T00:00", "2024-03-12T12:00", "2024-03-13T00:00"):
                client.post("/api/meals", json={"description": "snack", "local_date_time": stamp})
        resp = client.get("/api/meals/range", params={"start": "2024-03-10", "end": "2024-03-12"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            [e["local_date_time"] for e in resp.json()["entries"]],
            ["2024-03-10T00:00:00", "2024-03-12T12:00:00"],
        )
        self.assertEqual(client.get("/api/meals/range", params={"start": "2024-03-12", "end": "2024-03-10"}).status_code, 400)

    def test_other_users_cannot_touch_entries(self) -> None:
        owner, intruder = self.user_client(), self.user_client()
        with mock.patch("daily_tracker.meals.api.estimate_macros", return_value=None):
            meal = owner.post("/api/meals", json={"description": "Toast", "local_date_time": "2024-03-10T07:00"}).json()
            resp = intruder.put(f"/api/meals/{meal['id']}", json={"description": "Hacked", "local_date_time": "2024-03-10T07:00"})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(intruder.delete(f"/api/meals/{meal['id']}").status_code, 404)
        self.assertEqual(intruder.get("/api/meals", params={"date": "2024-03-10"}).json()["count"], 0)

    def test_invalid_timestamp_is_422(self) -> None:
        client = self.user_client()
        with mock.patch("daily_tracker.meals.api.estimate_macros") as estimate:
            resp = client.post("/api/meals", json={"description": "Cake", "local_date_time": "2024-02-30T10:00"})
            estimate.assert_not_called()
        self.assertEqual(resp.status_code, 422)
        self.assertIn("invalid timestamp", resp.json()["detail"])
        self.assertEqual(client.get("/api/meals", params={"date": "2024-13-01"}).status_code, 422)

    def test_ai_limit_blocks_free_users(self) -> None:
        client = self.user_client()
        with mock.patch("daily_tracker.meals.api.estimate_macros", return_value=_macros(100)):
            for _ in range(3):
                resp = client.post("/api/meals", json={"description": "Apple", "local_date_time": "2024-03-10T10:00"})
                self.assertEqual(resp.status_code, 200)
            resp = client.post("/api/meals", json={"description": "Apple", "local_date_time": "2024-03-10T10:00"})
        self.assertEqual(resp.status_code, 403)
        self.assertIn("limit", resp.json()["detail"])


class TestActivityApi(ApiTestCase):
    def test_calories_need_a_weight(self) -> None:
        client = self.user_client()
        payload = {
            "activity_type": "Running",
            "description": "Morning run",
            "duration": 30,
            "intensity": "moderate",
            "local_date_time": "2024-03-10T06:30",
        }
        resp = client.post("/api/activity", json=payload)
        self.assertEqual(resp.status_code, 400)
        self.assertIn("weight", resp.json()["detail"])

        client.post("/api/weight", json={"local_date": "2024-03-01", "weight": 70})
        resp = client.post("/api/activity", json=payload)
        self.assertEqual(resp.status_code, 200, resp.text)
        body = resp.json()
        self.assertEqual(body["calories_burned"], 420)
        self.assertFalse(body["calories_manually_entered"])
        self.assertEqual(body["local_date_time"], "2024-03-10T06:30:00")

        resp = client.put(f"/api/activity/{body['id']}", json={**payload, "calories_burned": 300})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["calories_burned"], 300)
        self.assertTrue(resp.json()["calories_manually_entered"])

        resp = client.get("/api/activity", params={"date": "2024-03-10"})
        self.assertEqual(resp.json()["total_calories_burned"], 300)

        self.assertEqual(client.delete(f"/api/activity/{body['id']}").status_code, 200)
        self.assertEqual(client.put(f"/api/activity/{body['id']}", json=payload).status_code, 404)

    def test_calories_use_weight_as_of_activity_day(self) -> None:
        client = self.user_client()
        client.post("/api/weight", json={"local_date": "2024-03-01", "weight": 80})
        client.post("/api/weight", json={"local_date": "2024-03-20", "weight": 60})
        payload = {
            "activity_type": "Running",
            "description": "Tempo run",
            "duration": 30,
            "intensity": "moderate",
            "local_date_time": "2024-03-10T06:30",
        }
        resp = client.post("/api/activity", json=payload)
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["calories_burned"], 480)

        resp = client.post("/api/activity", json={**payload, "local_date_time": "2024-02-20T06:30"})
        self.assertEqual(resp.status_code, 400)

    def test_manual_calories_without_weight(self) -> None:
        client = self.user_client()
        resp = client.post(
            "/api/activity",
            json={
                "activity_type": "Yoga",
                "description": "Evening flow",
                "duration": 45,
                "intensity": "low",
                "local_date_time": "2024-03-10T19:00",
                "calories_burned": 150,
            },
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["calories_burned"], 150)

    def test_validation(self) -> None:
        client = self.user_client()
        base = {"activity_type": "Walking", "description": "Walk", "local_date_time": "2024-03-10T12:00"}
        self.assertEqual(client.post("/api/activity", json={**base, "duration": 0, "intensity": "low"}).status_code, 422)
        self.assertEqual(client.post("/api/activity", json={**base, "duration": 10, "intensity": "extreme"}).status_code, 422)

    def test_types(self) -> None:
        client = self.user_client()
        types = client.get("/api/activity/types").json()["types"]
        self.assertIn("Running", types)
        self.assertIn("Other", types)

    def test_balance_requires_profile(self) -> None:
        client = self.user_client()
        resp = client.get("/api/activity/balance", params={"date": "2024-03-10"})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertTrue(body["setup_required"])
        self.assertEqual(body["missing_fields"], ["birth_date", "sex", "height_cm", "weight"])
        self.assertIsNone(body["balance"])

    def test_balance_uses_tdee_plus_exercise(self) -> None:
        from daily_tracker.energy import compute_balance, compute_bmr, compute_tdee

        client = self.user_client()
        self.set_profile(client, birth_date="1994-01-01", sex="male", height_cm=175, activity_level="sedentary")
        client.post("/api/weight", json={"local_date": "2024-03-10", "weight": 70})
        client.post(
            "/api/activity",
            json={
                "activity_type": "Cycling",
                "description": "Commute",
                "duration": 20,
                "intensity": "low",
                "local_date_time": "2024-03-10T08:00",
                "calories_burned": 300,
            },
        )
        with mock.patch("daily_tracker.meals.api.estimate_macros", return_value=_macros(2000)):
            client.post("/api/meals", json={"description": "Everything", "local_date_time": "2024-03-10T13:00"})

        body = client.get("/api/activity/balance", params={"date": "2024-03-10"}).json()
        tdee = compute_tdee(compute_bmr("male", 70, 175, 30), "sedentary")
        expected = compute_balance(2000, 300, tdee)
        self.assertFalse(body["setup_required"])
        self.assertEqual(body["age"], 30)
        self.assertEqual(body["calories_consumed"], 2000)
        self.assertEqual(body["exercise_burned"], 300)
        self.assertEqual(body["tdee"], round(tdee))
        self.assertEqual(body["total_burned"], round(expected.total_burned))
        self.assertEqual(body["balance"], round(expected.balance))
        self.assertEqual(body["is_deficit"], expected.is_deficit)


class TestHealthApi(ApiTestCase):
    def test_crud_and_ranges(self) -> None:
        client = self.user_client()
        resp = client.post(
            "/api/health/entries",
            json={"consistency": "Type 4", "color": "brown", "pain_level": 2, "local_date_time": "2024-03-10T09:15"},
        )
        self.assertEqual(resp.status_code, 200, resp.text)
        entry = resp.json()
        self.assertEqual(entry["kind"], "health")
        self.assertEqual(entry["local_date_time"], "2024-03-10T09:15:00")

        resp = client.put(f"/api/health/entries/{entry['id']}", json={"pain_level": 5, "notes": "after coffee"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["pain_level"], 5)
        self.assertEqual(resp.json()["consistency"], "Type 4")
        self.assertEqual(resp.json()["notes"], "after coffee")

        resp = client.put(f"/api/health/entries/{entry['id']}", json={"local_date_time": "2024-03-11T10:00"})
        self.assertEqual(resp.json()["local_date_time"], "2024-03-11T10:00:00")

        self.assertEqual(client.get("/api/health/entries", params={"date": "2024-03-10"}).json()["count"], 0)
        self.assertEqual(client.get("/api/health/entries", params={"date": "2024-03-11"}).json()["count"], 1)
        resp = client.get("/api/health/entries/range", params={"start": "2024-03-01", "end": "2024-03-31"})
        self.assertEqual(resp.json()["count"], 1)

        self.assertEqual(client.delete(f"/api/health/entries/{entry['id']}").status_code, 200)
        self.assertEqual(client.delete(f"/api/health/entries/{entry['id']}").status_code, 404)

    def test_pain_level_bounds(self) -> None:
        client = self.user_client()
        resp = client.post(
            "/api/health/entries",
            json={"consistency": "Type 4", "color": "brown", "pain_level": 11, "local_date_time": "2024-03-10T09:15"},
        )
        self.assertEqual(resp.status_code, 422)


class TestWeightApi(ApiTestCase):
    def test_upsert_is_one_per_day(self) -> None:
        client = self.user_client()
        first = client.post("/api/weight", json={"local_date": "2024-03-10", "weight": 71.5}).json()
        second = client.post("/api/weight", json={"local_date": "2024-03-10", "weight": 71.0}).json()
        self.assertEqual(first["id"], second["id"])
        self.assertEqual(second["weight"], 71.0)
        self.assertEqual(second["local_date"], "2024-03-10")

        resp = client.get("/api/weight/date/2024-03-10")
        self.assertEqual(resp.json()["weight"], 71.0)
        self.assertIsNone(client.get("/api/weight/date/2024-03-11").json())

    def test_latest_month_update_delete(self) -> None:
        client = self.user_client()
        self.assertIsNone(client.get("/api/weight/latest").json())
        for day, kg in (("2024-02-28", 72), ("2024-03-01", 71), ("2024-03-15", 70)):
            client.post("/api/weight", json={"local_date": day, "weight": kg})

        self.assertEqual(client.get("/api/weight/latest").json()["local_date"], "2024-03-15")
        month = client.get("/api/weight/month", params={"year": 2024, "month": 3}).json()
        self.assertEqual([e["local_date"] for e in month["entries"]], ["2024-03-01", "2024-03-15"])

        entry_id = month["entries"][0]["id"]
        resp = client.put(f"/api/weight/{entry_id}", json={"weight": 69.5})
        self.assertEqual(resp.json()["weight"], 69.5)

        self.assertEqual(client.delete("/api/weight/date/2024-03-15").status_code, 200)
        self.assertEqual(client.delete("/api/weight/date/2024-03-15").status_code, 404)
        self.assertEqual(client.delete(f"/api/weight/{entry_id}").status_code, 200)
        self.assertEqual(client.get("/api/weight/latest").json()["local_date"], "2024-02-28")

    def test_bounds_and_ownership(self) -> None:
        owner, intruder = self.user_client(), self.user_client()
        self.assertEqual(owner.post("/api/weight", json={"local_date": "2024-03-10", "weight": 10}).status_code, 422)
        self.assertEqual(owner.post("/api/weight", json={"local_date": "2024-03-10", "weight": 301}).status_code, 422)
        entry = owner.post("/api/weight", json={"local_date": "2024-03-10", "weight": 80}).json()
        self.assertEqual(intruder.put(f"/api/weight/{entry['id']}", json={"weight": 60}).status_code, 404)
        self.assertEqual(intruder.delete(f"/api/weight/{entry['id']}").status_code, 404)


if __name__ == "__main__":
    unittest.main()
