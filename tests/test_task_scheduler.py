"""
Reminder / auto-complete scheduling.
"""
from datetime import date, datetime
from unittest.mock import MagicMock, patch

import pytest

from catering_api.services import task_scheduler
from catering_api.services.task_scheduler import KST, compute_schedule


NOW = datetime(2026, 11, 1, 9, 0, tzinfo=KST)


class TestComputeSchedule:

    @pytest.mark.unit
    def test_quick_reminder_after_one_hour(self):
        reminder_at, _ = compute_schedule("quick", date(2026, 11, 2), "11:30", now=NOW)
        assert reminder_at == datetime(2026, 11, 1, 10, 0, tzinfo=KST)

    @pytest.mark.unit
    def test_parcel_reminder_after_one_day(self):
        reminder_at, _ = compute_schedule("parcel", date(2026, 11, 2), "11:30", now=NOW)
        assert reminder_at == datetime(2026, 11, 2, 9, 0, tzinfo=KST)

    @pytest.mark.unit
    def test_auto_complete_three_days_after_reservation(self):
        _, auto_at = compute_schedule("pickup", "2026-11-02", "11:30", now=NOW)
        assert auto_at == datetime(2026, 11, 5, 11, 30, tzinfo=KST)

    @pytest.mark.unit
    def test_missing_time_uses_end_of_day(self):
        _, auto_at = compute_schedule("pickup", date(2026, 11, 2), None, now=NOW)
        assert auto_at == datetime(2026, 11, 5, 23, 59, 59, 999000, tzinfo=KST)


class TestScheduling:

    @pytest.mark.unit
    def test_local_scheduler_when_cloud_tasks_disabled(self):
        with patch.object(task_scheduler.settings, "use_cloud_tasks", False):
            ids = task_scheduler.schedule_order_completion_tasks(5, "quick", date(2026, 11, 2), "11:30")
        assert ids == ("local-notification-5", "local-autocomplete-5")

    @pytest.mark.unit
    def test_cloud_failure_falls_back_to_local(self):
        with patch.object(task_scheduler.settings, "use_cloud_tasks", True), \
             patch.object(task_scheduler, "create_cloud_completion_tasks", side_effect=RuntimeError("403")):
            ids = task_scheduler.schedule_order_completion_tasks(6, "quick", date(2026, 11, 2), "11:30")
        assert ids == ("local-notification-6", "local-autocomplete-6")

    @pytest.mark.unit
    def test_cancel_local_task_is_noop(self):
        with patch("catering_api.services.task_scheduler.requests.delete") as delete:
            assert task_scheduler.cancel_task("local-autocomplete-5") is True
        delete.assert_not_called()

    @pytest.mark.unit
    def test_cancel_missing_cloud_task_counts_as_done(self):
        response = MagicMock(status_code=404)
        response.json.return_value = {"error": {"code": 404, "status": "NOT_FOUND"}}

        with patch.object(task_scheduler, "_get_auth_token", return_value="token"), \
             patch("catering_api.services.task_scheduler.requests.delete", return_value=response):
            assert task_scheduler.cancel_task("order-autocomplete-5-1") is True

    @pytest.mark.unit
    def test_create_task_already_exists(self):
        response = MagicMock(status_code=409)
        response.json.return_value = {"error": {"code": 409, "status": "ALREADY_EXISTS"}}

        with patch.object(task_scheduler, "_get_auth_token", return_value="token"), \
             patch("catering_api.services.task_scheduler.requests.post", return_value=response):
            name = task_scheduler.create_task("order-notification-1-1", "http://x/y", {"orderId": 1}, NOW)

        assert name == "order-notification-1-1"
