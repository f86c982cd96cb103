import logging
from typing import Dict, Optional

from catering_api.models.notifications import (
    NotificationChannel,
    NotificationStatus,
    RecipientRole,
)
from catering_api.models.user import User
from catering_api.notifications.channels import Channel
from catering_api.notifications.events import OrderEvent
from catering_api.notifications.rules import NOTIFICATION_RULES
from catering_api.services import aligo_client, fcm_service
from catering_api.services.notification_service import create_notification

logger = logging.getLogger(__name__)


def _record(session, *, event, order, role, user_id, channel, title, content, ok):
    create_notification(
        session=session,
        recipient_role=role,
        user_id=user_id,
        trigger_source=event.value,
        related_id=getattr(order, "id", None),
        title=title,
        content=content,
        channel=channel,
        status=NotificationStatus.sent if ok else NotificationStatus.failed,
    )


def _alimtalk(session, *, event, order, role, user_id, phone, template, variables):
    if not phone or not template:
        logger.info(f"{event.value}: no phone/template for {role.value} alimtalk, skipped")
        return False

    try:
        ok = aligo_client.send_alimtalk(phone, template, variables)
    except Exception:
        logger.exception(f"{event.value}: {role.value} alimtalk failed")
        ok = False

    _record(
        session, event=event, order=order, role=role, user_id=user_id,
        channel=NotificationChannel.alimtalk, title=template,
        content=str(variables), ok=ok,
    )
    return ok


def _push(session, *, event, order, role, user_id, title, body, data):
    if not user_id or not title:
        return False

    try:
        result = fcm_service.send_order_push(
            session, user_id=user_id, title=title, body=body or "", data=data,
        )
        ok = bool(result.get("success"))
    except Exception:
        logger.exception(f"{event.value}: {role.value} push failed")
        ok = False

    _record(
        session, event=event, order=order, role=role, user_id=user_id,
        channel=NotificationChannel.push, title=title, content=body or "", ok=ok,
    )
    return ok


def dispatch_order_event(
    *,
    event: OrderEvent,
    order,
    session,
    extra: Optional[dict] = None,
    notify_customer: bool = True,
    notify_partner: bool = True,
    notify_admin: bool = True,
) -> Dict[str, bool]:
    """
    Central notification dispatcher.

    Looks up the channels enabled for ``event`` and fans out to
    Kakao alimtalk, SMS, FCM push and the admin in-app feed. A failing
    channel is logged and recorded as failed; it never raises.

    ``extra`` carries the per-event payload:
    partner_template / customer_template / variables (alimtalk),
    sms_message, push_title / push_body / push_data (customer push),
    partner_push_title / partner_push_body, admin_title / admin_content.
    """
    rules = NOTIFICATION_RULES.get(event, {})
    extra = extra or {}
    results: Dict[str, bool] = {}

    customer = session.get(User, order.user_id) if order.user_id else None
    partner = session.get(User, order.partner_id) if order.partner_id else None

    customer_phone = extra.get("customer_phone") or order.phone or (customer.phone if customer else None)
    partner_phone = extra.get("partner_phone") or order.partner_phone or (partner.phone if partner else None)
    variables = extra.get("variables", {})

    # -------------------------
    # ALIMTALK
    # -------------------------
    if notify_partner and rules.get(Channel.ALIMTALK_PARTNER):
        results[Channel.ALIMTALK_PARTNER.value] = _alimtalk(
            session, event=event, order=order, role=RecipientRole.partner,
            user_id=order.partner_id, phone=partner_phone,
            template=extra.get("partner_template"), variables=variables,
        )

    if notify_customer and rules.get(Channel.ALIMTALK_CUSTOMER):
        results[Channel.ALIMTALK_CUSTOMER.value] = _alimtalk(
            session, event=event, order=order, role=RecipientRole.customer,
            user_id=order.user_id, phone=customer_phone,
            template=extra.get("customer_template"), variables=variables,
        )

    # -------------------------
    # SMS
    # -------------------------
    if notify_customer and rules.get(Channel.SMS_CUSTOMER) and extra.get("sms_message"):
        if customer_phone:
            try:
                ok = aligo_client.send_sms(customer_phone, extra["sms_message"])
            except Exception:
                logger.exception(f"{event.value}: customer SMS failed")
                ok = False
            _record(
                session, event=event, order=order, role=RecipientRole.customer,
                user_id=order.user_id, channel=NotificationChannel.sms,
                title=event.value, content=extra["sms_message"], ok=ok,
            )
            results[Channel.SMS_CUSTOMER.value] = ok
        else:
            results[Channel.SMS_CUSTOMER.value] = False

    # -------------------------
    # PUSH
    # -------------------------
    if notify_customer and rules.get(Channel.PUSH_CUSTOMER):
        results[Channel.PUSH_CUSTOMER.value] = _push(
            session, event=event, order=order, role=RecipientRole.customer,
            user_id=order.user_id, title=extra.get("push_title"),
            body=extra.get("push_body"), data=extra.get("push_data"),
        )

    if notify_partner and rules.get(Channel.PUSH_PARTNER):
        results[Channel.PUSH_PARTNER.value] = _push(
            session, event=event, order=order, role=RecipientRole.partner,
            user_id=order.partner_id, title=extra.get("partner_push_title"),
            body=extra.get("partner_push_body"), data=extra.get("push_data"),
        )

    # -------------------------
    # ADMIN IN-APP NOTIFICATION
    # -------------------------
    if notify_admin and rules.get(Channel.INAPP_ADMIN):
        create_notification(
            session=session,
            recipient_role=RecipientRole.admin,
            user_id=None,
            trigger_source=event.value,
            related_id=getattr(order, "id", None),
            title=extra.get("admin_title", "Order Update"),
            content=extra.get("admin_content", ""),
        )
        results[Channel.INAPP_ADMIN.value] = True

    session.commit()
    return results
