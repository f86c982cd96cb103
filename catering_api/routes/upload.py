import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from catering_api.models.user import User
from catering_api.services import r2_client
from catering_api.utils.token import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/upload")
def upload_file(
    file: Optional[UploadFile] = File(None),
    folder: str = Form(r2_client.DEFAULT_FOLDER),
    _: User = Depends(get_current_user),
):
    if file is None or not file.filename:
        raise HTTPException(400, "파일이 없습니다.")

    try:
        key = r2_client.upload_image(file, folder)
    except Exception:
        logger.exception("R2 upload failed")
        raise HTTPException(500, "Upload failed")

    return {"success": True, "url": r2_client.public_url(key), "key": key}
