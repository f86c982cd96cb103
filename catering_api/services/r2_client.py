import logging
import os
import secrets
import string
import time

import boto3
from dotenv import load_dotenv
from fastapi import UploadFile
from slugify import slugify

load_dotenv()

logger = logging.getLogger(__name__)

R2_ACCOUNT_ID = os.getenv("R2_ACCOUNT_ID")
R2_ACCESS_KEY_ID = os.getenv("R2_ACCESS_KEY_ID")
R2_SECRET_ACCESS_KEY = os.getenv("R2_SECRET_ACCESS_KEY")
R2_BUCKET_NAME = os.getenv("R2_BUCKET_NAME")
R2_PUBLIC_BASE = os.getenv("R2_PUBLIC_BASE", "")

DEFAULT_FOLDER = "restaurants"

s3_client = boto3.client(
    "s3",
    endpoint_url=f"https://{R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
    aws_access_key_id=R2_ACCESS_KEY_ID,
    aws_secret_access_key=R2_SECRET_ACCESS_KEY,
    region_name="auto"
)

_ALPHABET = string.ascii_lowercase + string.digits


def build_key(filename: str, folder: str = DEFAULT_FOLDER) -> str:
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else "bin"
    random_id = "".join(secrets.choice(_ALPHABET) for _ in range(13))
    return f"{slugify(folder) or DEFAULT_FOLDER}/{int(time.time() * 1000)}_{random_id}.{ext}"


def public_url(key: str) -> str:
    return f"{R2_PUBLIC_BASE.rstrip('/')}/{key}"


def upload_image(file: UploadFile, folder: str = DEFAULT_FOLDER) -> str:
    key = build_key(file.filename or "upload", folder)

    s3_client.upload_fileobj(
        file.file,
        R2_BUCKET_NAME,
        key,
        ExtraArgs={"ContentType": file.content_type or "application/octet-stream"}
    )
    logger.info(f"Uploaded {key} to R2")
    return key
