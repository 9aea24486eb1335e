import os
import re
import uuid
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pathlib import Path
from dotenv import load_dotenv

from logging_setup import get_logger

load_dotenv()

_logger = get_logger("finance_dashboard.storage")

# Environment variables
S3_BUCKET = os.environ.get("S3_BUCKET")
AWS_REGION = os.environ.get("AWS_REGION", "us-east-1")
RECEIPTS_DIR = os.environ.get("RECEIPTS_DIR", "receipts")

_UNIQUE_PREFIX = re.compile(r"^[0-9a-f]{32}_")

def get_s3_client():
    return boto3.client("s3", region_name=AWS_REGION)

def unique_name(file_name: str) -> str:
    """
    Storage name for an upload, so two receipts called image.jpg never collide.
    """
    return f"{uuid.uuid4().hex}_{Path(file_name).name}"

def original_name(stored_name: str) -> str:
    return _UNIQUE_PREFIX.sub("", stored_name)

def _local_path(folder: str, file_name: str) -> Path:
    # Uploaded names come from the browser; keep only the final component.
    return Path(RECEIPTS_DIR) / folder / Path(file_name).name

def save_file(file_name: str, data: bytes, folder: str = "receipts") -> bool:
    """
    Saves a receipt to either S3 or local disk.
    """
    if S3_BUCKET:
        s3 = get_s3_client()
        key = f"{folder}/{Path(file_name).name}"
        try:
            s3.put_object(Bucket=S3_BUCKET, Key=key, Body=data)
            return True
        except (BotoCoreError, ClientError):
            _logger.exception("S3 upload failed for %s", key)
            return False
    else:
        # Local fallback
        local_path = _local_path(folder, file_name)
        try:
            local_path.parent.mkdir(parents=True, exist_ok=True)
            local_path.write_bytes(data)
            return True
        except OSError:
            _logger.exception("Local save failed for %s", local_path)
            return False

def load_file(file_name: str, folder: str = "receipts") -> bytes | None:
    """
    Loads a receipt from either S3 or local disk.
    """
    if S3_BUCKET:
        s3 = get_s3_client()
        key = f"{folder}/{Path(file_name).name}"
        try:
            obj = s3.get_object(Bucket=S3_BUCKET, Key=key)
            return obj["Body"].read()
        except s3.exceptions.NoSuchKey:
            return None
        except (BotoCoreError, ClientError):
            _logger.exception("S3 download failed for %s", key)
            return None
    else:
        local_path = _local_path(folder, file_name)
        if local_path.exists():
            return local_path.read_bytes()
        return None
