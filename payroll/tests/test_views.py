"""
Tests for the stateless payroll calculation endpoints.
"""

from django.urls import reverse

STAFF_URL = "/api/v1/payroll/staff/calculate/"
BULK_URL = "/api/v1/payroll/staff/calculate-bulk/"
PHYSICIAN_URL = "/api/v1/payroll/physicians/calculate/"


def staff_payload(**worker_overrides):
    worker = {
        "worker_id": "w1",
        "name": "Lin Mei",
        "pay_mode": "hourly",
        "base_rate": 200,
    }
    worker.update(worker_overrides)
    return {
        "year": 2025,
        "month": 3,
        "worker": worker,
        "events": [
            {
                "clock_in": "2025-03-03T08:00:00+08:00",
                "clock_out": "2025-03-03T18:00:00+08:00",
            }
        ],
    }


class TestStaffCalculationView:
    def test_routes(self):
        assert reverse("staff-payroll-calculate") == STAFF_URL
        assert reverse("staff-payroll-calculate-bulk") == BULK_URL
        assert reverse("physician-payroll-calculate") == PHYSICIAN_URL

    def test_ordinary_day_with_overtime(self, api_client):
        response = api_client.post(STAFF_URL, staff_payload(), format="json")

        assert response.status_code == 200
        data = response.json()
        assert data["monthly_standard_hours"] == "168"
        assert data["base_pay"] == "1600"
        assert data["ot_pay"] == "536"
        record = data["daily_records"][0]
        assert record["work_date"] == "2025-03-03"
        assert record["total_hours"] == "10.00"
        assert record["pay"] == "2136"
        assert record["shift_info"] == "actual"

    def test_utc_timestamps_are_bucketed_on_clinic_calendar(self, api_client):
        payload = staff_payload()
        payload["events"] = [
            {"clock_in": "2025-03-02T23:00:00Z", "clock_out": "2025-03-03T03:00:00Z"}
        ]

        response = api_client.post(STAFF_URL, payload, format="json")

        record = response.json()["daily_records"][0]
        assert record["work_date"] == "2025-03-03"
        assert record["clock_in"] == "07:00"

    def test_leave_label_and_monthly_deduction(self, api_client):
        payload = staff_payload(pay_mode="monthly", base_rate=48000)
        payload["events"] = []
        payload["leaves"] = [{"leave_type": "事假", "hours": 8}]

        response = api_client.post(STAFF_URL, payload, format="json")

        assert response.status_code == 200
        assert response.json()["leave_deduction"] == "1600"
        assert response.json()["net_pay"] == "46400"

    def test_schedule_mode_with_roster(self, api_client):
        payload = staff_payload(accounting_mode="schedule")
        payload["schedule"] = [
            {"date": "2025-03-03", "shifts": [{"name": "day", "start": "09:00", "end": "17:00"}]}
        ]

        response = api_client.post(STAFF_URL, payload, format="json")

        record = response.json()["daily_records"][0]
        assert record["total_hours"] == "8.00"
        assert record["shift_info"] == "09:00-17:00"

    def test_non_positive_rate_is_a_configuration_error(self, api_client):
        response = api_client.post(STAFF_URL, staff_payload(base_rate=0), format="json")

        assert response.status_code == 400
        data = response.json()
        assert data["error"] is True
        assert data["code"] == "PAYROLL_CONFIGURATION_ERROR"
        assert data["details"] == {"field": "base_rate"}

    def test_shifts_on_mandatory_rest_day_are_rejected(self, api_client):
        payload = staff_payload()
        payload["schedule"] = [
            {
                "date": "2025-03-09",
                "day_flag": "regular",
                "shifts": [{"start": "09:00", "end": "12:00"}],
            }
        ]

        response = api_client.post(STAFF_URL, payload, format="json")

        assert response.status_code == 400
        assert response.json()["code"] == "PAYROLL_CONFIGURATION_ERROR"

    def test_malformed_request_is_a_validation_error(self, api_client):
        payload = staff_payload()
        del payload["worker"]

        response = api_client.post(STAFF_URL, payload, format="json")

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_unknown_leave_type_is_a_validation_error(self, api_client):
        payload = staff_payload()
        payload["leaves"] = [{"leave_type": "vacation-ish", "hours": 8}]

        response = api_client.post(STAFF_URL, payload, format="json")

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"


class TestBulkCalculationView:
    def test_bad_worker_is_reported_and_others_computed(self, api_client):
        good = staff_payload()
        bad = staff_payload(worker_id="w2", base_rate=-1)
        payload = {
            "year": 2025,
            "month": 3,
            "workers": [
                {k: v for k, v in good.items() if k not in ("year", "month")},
                {k: v for k, v in bad.items() if k not in ("year", "month")},
            ],
        }

        response = api_client.post(BULK_URL, payload, format="json")

        assert response.status_code == 200
        data = response.json()
        assert list(data["results"]) == ["w1"]
        assert data["results"]["w1"]["ot_pay"] == "536"
        assert "w2" in data["errors"]

    def test_repeated_worker_id_is_rejected(self, api_client):
        worker_month = {k: v for k, v in staff_payload().items() if k not in ("year", "month")}
        payload = {"year": 2025, "month": 3, "workers": [worker_month, worker_month]}

        response = api_client.post(BULK_URL, payload, format="json")

        assert response.status_code == 400
        data = response.json()
        assert data["code"] == "VALIDATION_ERROR"
        assert "w1" in data["message"]

    def test_empty_batch_is_rejected(self, api_client):
        response = api_client.post(
            BULK_URL, {"year": 2025, "month": 3, "workers": []}, format="json"
        )

        assert response.status_code == 400


class TestPhysicianCalculationView:
    def test_guarantee_mode(self, api_client):
        payload = {
            "year": 2025,
            "month": 3,
            "config": {
                "mode": "guarantee",
                "hourly_rate": 500,
                "guarantee_salary": 80000,
                "standard_hours": 120,
            },
            "performance": {"nhi_points": 118750, "past_base_salary": 90000},
            "actual_hours": 140,
        }

        response = api_client.post(PHYSICIAN_URL, payload, format="json")

        assert response.status_code == 200
        data = response.json()
        assert data["base_pay"] == "90000"
        assert data["nhi_rate"] == "0.8"
        assert data["bonus"] == "5000"
        assert data["performance_period"] == "2025-01"

    def test_past_base_defaults_to_guarantee_and_hours_from_shifts(self, api_client):
        payload = {
            "year": 2025,
            "month": 3,
            "config": {
                "mode": "guarantee",
                "hourly_rate": 500,
                "guarantee_salary": 80000,
                "standard_hours": 7,
            },
            "performance": {"nhi_points": 110000},
            "shifts": [
                {"date": "2025-03-03", "start": "09:00", "end": "12:30"},
                {"date": "2025-03-04"},
            ],
        }

        response = api_client.post(PHYSICIAN_URL, payload, format="json")

        data = response.json()
        assert data["actual_hours"] == "7.00"
        assert data["past_base_salary"] == "80000"
        # 110000 x 0.8 - 80000
        assert data["bonus"] == "8000"

    def test_unknown_mode_is_rejected(self, api_client):
        payload = {
            "year": 2025,
            "month": 3,
            "config": {"mode": "salary", "hourly_rate": 500},
            "performance": {"nhi_points": 1},
        }

        response = api_client.post(PHYSICIAN_URL, payload, format="json")

        assert response.status_code == 400


class TestStandardHoursAndHealth:
    def test_standard_hours(self, api_client):
        response = api_client.get(reverse("standard-hours"), {"year": 2025, "month": 3})

        assert response.status_code == 200
        assert response.json()["standard_hours"] == "168"
        assert response.json()["working_days"] == 21

    def test_standard_hours_requires_a_valid_month(self, api_client):
        response = api_client.get(reverse("standard-hours"), {"year": 2025, "month": 13})

        assert response.status_code == 400

    def test_health(self, api_client):
        response = api_client.get(reverse("health-check"))

        assert response.status_code == 200
        assert response.json()["status"] == "online"
