"""
Purchase-confirmation scheduling.

When an order ships two HTTP tasks are queued against this API:

- a reminder asking the customer to confirm the purchase
  (``/orders/send-confirmation-reminder``)
- an automatic confirmation three days after the reservation
  (``/orders/auto-complete``)

Tasks go to Google Cloud Tasks when ``USE_CLOUD_TASKS`` is set; otherwise
(or when Cloud Tasks fails) the local scheduler only logs the computed times.
"""
import base64
import json
import logging
import time
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Tuple, Union

import requests
from google.auth.transport.requests import Request as GoogleAuthRequest
from google.oauth2 import service_account

from catering_api.config import settings
from catering_api.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

KST = timezone(timedelta(hours=9), "KST")

CLOUD_TASKS_API = "https://cloudtasks.googleapis.com/v2"
CLOUD_TASKS_SCOPE = "https://www.googleapis.com/auth/cloud-tasks"

PARCEL_REMINDER_DELAY = timedelta(hours=24)
DEFAULT_REMINDER_DELAY = timedelta(hours=1)
AUTO_COMPLETE_DELAY = timedelta(days=3)

_credentials = None


def queue_path() -> str:
    return (
        f"projects/{settings.google_cloud_project or settings.firebase_project_id}"
        f"/locations/{settings.cloud_tasks_location}"
        f"/queues/{settings.cloud_tasks_queue}"
    )


def _get_auth_token() -> str:
    global _credentials

    if _credentials is None:
        _credentials = service_account.Credentials.from_service_account_info(
            {
                "type": "service_account",
                "project_id": settings.google_cloud_project or settings.firebase_project_id,
                "client_email": settings.firebase_client_email,
                "private_key": (settings.firebase_private_key or "").replace("\\n", "\n"),
                "token_uri": "https://oauth2.googleapis.com/token",
            },
            scopes=[CLOUD_TASKS_SCOPE],
        )

    if not _credentials.valid:
        _credentials.refresh(GoogleAuthRequest())

    return _credentials.token


def _as_date(value: Union[date, str]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def compute_schedule(
    delivery_method: str,
    delivery_date: Union[date, str],
    delivery_time: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Tuple[datetime, datetime]:
    """Reminder and auto-complete times (timezone aware, KST)."""
    now = now or datetime.now(KST)

    delay = PARCEL_REMINDER_DELAY if delivery_method == "parcel" else DEFAULT_REMINDER_DELAY
    reminder_at = now + delay

    day = _as_date(delivery_date)
    if delivery_time:
        hours, minutes = (int(part) for part in delivery_time.split(":")[:2])
        reservation = datetime(day.year, day.month, day.day, hours, minutes, tzinfo=KST)
    else:
        # end of the reservation day
        reservation = datetime(day.year, day.month, day.day, 23, 59, 59, 999000, tzinfo=KST)

    return reminder_at, reservation + AUTO_COMPLETE_DELAY


def create_task(task_name: str, url: str, payload: dict, schedule_time: datetime) -> str:
    token = _get_auth_token()
    path = queue_path()

    task = {
        "name": f"{path}/tasks/{task_name}",
        "httpRequest": {
            "httpMethod": "POST",
            "url": url,
            "headers": {"Content-Type": "application/json"},
            "body": base64.b64encode(json.dumps(payload).encode("utf-8")).decode("ascii"),
        },
        "scheduleTime": schedule_time.astimezone(timezone.utc).isoformat().replace("+00:00", "Z"),
    }

    response = requests.post(
        f"{CLOUD_TASKS_API}/{path}/tasks",
        json={"task": task},
        headers={"Authorization": f"Bearer {token}"},
        timeout=10,
    )

    if response.status_code >= 400:
        try:
            error = response.json().get("error", {})
        except ValueError:
            error = {}
        if error.get("code") == 409 or error.get("status") == "ALREADY_EXISTS":
            logger.info(f"Cloud task already exists: {task_name}")
            return task_name
        raise ExternalServiceError(f"Cloud Tasks API error: {response.text}")

    name = response.json().get("name") or task_name
    logger.info(f"Cloud task created: {name}")
    return name


def cancel_task(task_id: Optional[str]) -> bool:
    if not task_id:
        return True

    if task_id.startswith("local-"):
        logger.info(f"Local task {task_id}, nothing to cancel")
        return True

    task_path = task_id if task_id.startswith("projects/") else f"{queue_path()}/tasks/{task_id}"

    try:
        token = _get_auth_token()
        response = requests.delete(
            f"{CLOUD_TASKS_API}/{task_path}",
            headers={"Authorization": f"Bearer {token}"},
            timeout=10,
        )
    except Exception:
        logger.exception(f"Cloud task cancel failed: {task_id}")
        return False

    if response.status_code >= 400:
        try:
            error = response.json().get("error", {})
        except ValueError:
            error = {}
        if error.get("code") == 404 or error.get("status") == "NOT_FOUND" or response.status_code == 404:
            logger.info(f"Cloud task already gone: {task_id}")
            return True
        logger.error(f"Cloud task cancel failed ({response.status_code}): {response.text}")
        return False

    logger.info(f"Cloud task cancelled: {task_id}")
    return True


def create_cloud_completion_tasks(order_id, delivery_method, delivery_date, delivery_time=None):
    reminder_at, auto_complete_at = compute_schedule(delivery_method, delivery_date, delivery_time)
    logger.info(
        f"Scheduling order {order_id}: reminder {reminder_at.isoformat()}, "
        f"auto-complete {auto_complete_at.isoformat()}"
    )

    timestamp = int(time.time() * 1000)
    base_url = settings.base_url.rstrip("/")
    notification_task_id = None

    try:
        notification_task_id = create_task(
            f"order-notification-{order_id}-{timestamp}",
            f"{base_url}/orders/send-confirmation-reminder",
            {"orderId": order_id},
            reminder_at,
        )
        auto_complete_task_id = create_task(
            f"order-autocomplete-{order_id}-{timestamp}",
            f"{base_url}/orders/auto-complete",
            {"orderId": order_id},
            auto_complete_at,
        )
    except Exception:
        if notification_task_id:
            cancel_task(notification_task_id)
        raise

    return notification_task_id, auto_complete_task_id


def create_local_completion_tasks(order_id, delivery_method, delivery_date, delivery_time=None):
    reminder_at, auto_complete_at = compute_schedule(delivery_method, delivery_date, delivery_time)
    logger.info(
        f"[LocalScheduler] order {order_id}: reminder {reminder_at.isoformat()}, "
        f"auto-complete {auto_complete_at.isoformat()} (not actually scheduled)"
    )
    return f"local-notification-{order_id}", f"local-autocomplete-{order_id}"


def schedule_order_completion_tasks(order_id, delivery_method, delivery_date, delivery_time=None):
    if settings.use_cloud_tasks:
        try:
            return create_cloud_completion_tasks(order_id, delivery_method, delivery_date, delivery_time)
        except Exception:
            logger.exception("Cloud Tasks scheduling failed, falling back to local scheduler")

    return create_local_completion_tasks(order_id, delivery_method, delivery_date, delivery_time)
