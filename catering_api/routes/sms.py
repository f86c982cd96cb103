from fastapi import APIRouter, Depends
from sqlmodel import Session

from catering_api.database import get_session
from catering_api.schemas.notification_schemas import PhoneRequest, PhoneVerifyRequest
from catering_api.services import verification_service

router = APIRouter()


@router.post("/send")
def send_code(data: PhoneRequest, session: Session = Depends(get_session)):
    verification_service.send_verification_code(session, data.phone)
    return {"success": True, "message": "인증번호가 발송되었습니다."}


@router.post("/verify")
def verify_code(data: PhoneVerifyRequest, session: Session = Depends(get_session)):
    verification_service.verify_code(session, data.phone, data.code)
    return {"success": True, "message": "인증이 완료되었습니다."}
