import logging
import secrets
from datetime import datetime, timedelta

from sqlmodel import Session, select

from catering_api.exceptions import CateringError, ExternalServiceError
from catering_api.models.phone_verification import PhoneVerification
from catering_api.models.user import User
from catering_api.services import aligo_client
from catering_api.utils.phone import is_valid_phone, normalize_phone
from catering_api.utils.template import render_template

logger = logging.getLogger(__name__)

CODE_TTL = timedelta(minutes=5)


def generate_code() -> str:
    return f"{secrets.randbelow(900000) + 100000}"


def send_verification_code(session: Session, phone: str) -> None:
    if not phone:
        raise CateringError("전화번호를 입력해주세요.")

    if not is_valid_phone(phone):
        raise CateringError("올바른 전화번호 형식이 아닙니다.")

    normalized = normalize_phone(phone)

    registered = session.exec(
        select(User).where(User.phone.in_([phone, normalized]))
    ).first()
    if registered:
        raise CateringError("이미 가입된 전화번호입니다.")

    code = generate_code()
    message = render_template("sms/verification_code.txt", code=code)

    if not aligo_client.send_sms(normalized, message):
        raise ExternalServiceError("SMS 발송에 실패했습니다.", status_code=500)

    # newest code replaces any earlier one
    row = session.exec(
        select(PhoneVerification).where(PhoneVerification.phone == normalized)
    ).first()
    if row:
        row.code = code
        row.expires_at = datetime.utcnow() + CODE_TTL
        row.created_at = datetime.utcnow()
    else:
        row = PhoneVerification(phone=normalized, code=code, expires_at=datetime.utcnow() + CODE_TTL)

    session.add(row)
    session.commit()
    logger.info(f"Verification code sent to {normalized}")


def verify_code(session: Session, phone: str, code: str) -> None:
    if not phone or not code:
        raise CateringError("전화번호와 인증번호를 입력해주세요.")

    normalized = normalize_phone(phone)
    row = session.exec(
        select(PhoneVerification).where(PhoneVerification.phone == normalized)
    ).first()

    if not row:
        raise CateringError("인증번호를 먼저 요청해주세요.")

    if row.expires_at < datetime.utcnow():
        session.delete(row)
        session.commit()
        raise CateringError("인증번호가 만료되었습니다. 다시 요청해주세요.")

    if row.code != code:
        raise CateringError("인증번호가 일치하지 않습니다.")

    session.delete(row)
    session.commit()
