from fastapi import Depends, HTTPException
from catering_api.models.user import User
from catering_api.utils.token import get_current_user


def require_admin(current_user: User = Depends(get_current_user)):
    if current_user.role != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return current_user


def require_partner(current_user: User = Depends(get_current_user)):
    if current_user.role not in ("partner", "admin"):
        raise HTTPException(status_code=403, detail="Partner access required")
    return current_user
