from datetime import datetime

import requests
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlmodel import Session, text

from catering_api.database import get_session

router = APIRouter()


@router.get("/health")
def health_check(session: Session = Depends(get_session)):
    db_status = "ok"

    try:
        # simple DB ping
        session.exec(text("SELECT 1"))
    except Exception:
        db_status = "failed"

    return {
        "status": "ok",
        "database": db_status,
        "timestamp": datetime.utcnow().isoformat(),
    }


@router.get("/check-ip")
def check_ip(request: Request):
    """Public IP of this server, needed for allow-listing at the courier and SMS vendors."""
    try:
        response = requests.get("https://api.ipify.org?format=json", timeout=5)
        server_ip = response.json()["ip"]
    except (requests.RequestException, ValueError, KeyError):
        raise HTTPException(500, "Failed to check IP")

    return {
        "serverIp": server_ip,
        "headers": {
            "x-forwarded-for": request.headers.get("x-forwarded-for"),
            "x-real-ip": request.headers.get("x-real-ip"),
        },
        "timestamp": datetime.utcnow().isoformat(),
    }
