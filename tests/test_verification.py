"""
Phone verification codes over SMS.
"""
from datetime import datetime, timedelta
from unittest.mock import patch

import pytest
from sqlmodel import select

from catering_api.exceptions import CateringError, ExternalServiceError
from catering_api.models.phone_verification import PhoneVerification
from catering_api.services import verification_service


class TestSendCode:

    @pytest.mark.unit
    def test_stores_code_for_normalized_phone(self, session, outbound):
        with patch.object(verification_service, "generate_code", return_value="123456"):
            verification_service.send_verification_code(session, "010-5555-6666")

        row = session.exec(select(PhoneVerification)).one()
        assert row.phone == "01055556666"
        assert row.code == "123456"
        assert "123456" in outbound["sms"].call_args.args[1]

    @pytest.mark.unit
    def test_invalid_format(self, session):
        with pytest.raises(CateringError) as exc:
            verification_service.send_verification_code(session, "02-123-4567")
        assert exc.value.message == "올바른 전화번호 형식이 아닙니다."

    @pytest.mark.unit
    def test_registered_phone_rejected(self, session, consumer):
        with pytest.raises(CateringError) as exc:
            verification_service.send_verification_code(session, "010-1111-2222")
        assert exc.value.message == "이미 가입된 전화번호입니다."

    @pytest.mark.unit
    def test_sms_failure(self, session, outbound):
        outbound["sms"].return_value = False
        with pytest.raises(ExternalServiceError) as exc:
            verification_service.send_verification_code(session, "01055556666")
        assert exc.value.status_code == 500

    @pytest.mark.unit
    def test_resend_replaces_code(self, session):
        with patch.object(verification_service, "generate_code", side_effect=["111111", "222222"]):
            verification_service.send_verification_code(session, "01055556666")
            verification_service.send_verification_code(session, "01055556666")

        rows = session.exec(select(PhoneVerification)).all()
        assert [r.code for r in rows] == ["222222"]


class TestVerifyCode:

    def _row(self, session, code="654321", expires_in=timedelta(minutes=5)):
        session.add(PhoneVerification(phone="01055556666", code=code, expires_at=datetime.utcnow() + expires_in))
        session.commit()

    @pytest.mark.unit
    def test_success_deletes_code(self, session):
        self._row(session)
        verification_service.verify_code(session, "010-5555-6666", "654321")
        assert session.exec(select(PhoneVerification)).first() is None

    @pytest.mark.unit
    def test_mismatch(self, session):
        self._row(session)
        with pytest.raises(CateringError) as exc:
            verification_service.verify_code(session, "01055556666", "000000")
        assert exc.value.message == "인증번호가 일치하지 않습니다."

    @pytest.mark.unit
    def test_expired(self, session):
        self._row(session, expires_in=timedelta(minutes=-1))
        with pytest.raises(CateringError):
            verification_service.verify_code(session, "01055556666", "654321")
        assert session.exec(select(PhoneVerification)).first() is None

    @pytest.mark.unit
    def test_not_requested(self, session):
        with pytest.raises(CateringError) as exc:
            verification_service.verify_code(session, "01055556666", "654321")
        assert exc.value.message == "인증번호를 먼저 요청해주세요."

    @pytest.mark.api
    def test_routes(self, client):
        with patch.object(verification_service, "generate_code", return_value="777777"):
            sent = client.post("/sms/send", json={"phone": "010-5555-6666"})
        assert sent.status_code == 200

        wrong = client.post("/sms/verify", json={"phone": "010-5555-6666", "code": "000000"})
        assert wrong.status_code == 400
        assert wrong.json()["success"] is False

        ok = client.post("/sms/verify", json={"phone": "010-5555-6666", "code": "777777"})
        assert ok.status_code == 200
