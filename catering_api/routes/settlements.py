from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from sqlmodel import Session

from catering_api.database import get_session
from catering_api.dependencies.auth import require_admin, require_partner
from catering_api.models.user import User
from catering_api.schemas.content_schemas import SettlementCompleteRequest
from catering_api.services import settlement_service

router = APIRouter()


@router.get("/admin/settlements")
def admin_settlements(
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    partners = settlement_service.build_settlements(session)
    return {
        "success": True,
        "partners": partners,
        "totalPending": sum(p["pendingCount"] for p in partners),
    }


@router.post("/admin/settlements/complete")
def complete_settlements(
    data: SettlementCompleteRequest,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    if not data.orderIds:
        raise HTTPException(400, "orderIds is required")

    updated = settlement_service.complete_settlements(session, data.orderIds)
    return {"success": True, "updated": updated}


@router.get("/admin/settlements/export")
def export_settlements(
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    buffer = settlement_service.export_settlements(
        settlement_service.build_settlements(session)
    )
    filename = f"settlements_{datetime.utcnow().strftime('%Y%m%d')}.xlsx"

    return StreamingResponse(
        buffer,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/partner/settlements")
def partner_settlements(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_partner),
):
    partners = settlement_service.build_settlements(session, partner_id=current_user.id)
    if not partners:
        return {
            "success": True,
            "orders": [],
            "totalSales": 0,
            "totalFee": 0,
            "totalSettlement": 0,
            "pendingCount": 0,
            "completedCount": 0,
        }
    return {"success": True, **partners[0]}
