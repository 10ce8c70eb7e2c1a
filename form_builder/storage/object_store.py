"""JSON blob access to an S3-compatible bucket (MinIO by default).

Provides reusable access to the bucket with consistent "not found" handling.
"""

import json
import logging
import threading
from typing import Any, List, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from form_builder.core.config import Settings

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = frozenset({"NoSuchKey", "NoSuchBucket", "404", "NotFound"})


def is_not_found(error: Exception) -> bool:
    """True when a storage error means the object (or bucket) is absent."""
    if not isinstance(error, ClientError):
        return False
    code = str(error.response.get("Error", {}).get("Code", ""))
    return code in NOT_FOUND_CODES


def create_s3_client(settings: Settings):
    """Create a boto3 S3 client for the configured endpoint."""
    return boto3.client(
        "s3",
        endpoint_url=settings.storage_url,
        aws_access_key_id=settings.storage_access_key,
        aws_secret_access_key=settings.storage_secret_key,
        region_name=settings.storage_region,
        config=Config(signature_version="s3v4", s3={"addressing_style": "path"}),
    )


class ObjectStore:
    """Get/put/list/delete JSON objects in one bucket.

    The bucket is created on first use if it does not exist.
    """

    def __init__(self, client, bucket: str):
        self._client = client
        self._bucket = bucket
        self._bucket_ready = False
        self._lock = threading.Lock()

    @property
    def bucket(self) -> str:
        return self._bucket

    @classmethod
    def from_settings(cls, settings: Settings) -> "ObjectStore":
        return cls(create_s3_client(settings), settings.storage_bucket)

    def ensure_bucket(self) -> None:
        """Create the bucket if missing (checked once per store)."""
        if self._bucket_ready:
            return
        with self._lock:
            if self._bucket_ready:
                return
            try:
                self._client.head_bucket(Bucket=self._bucket)
            except ClientError as e:
                if not is_not_found(e):
                    raise
                logger.info(f"Creating bucket '{self._bucket}'")
                self._client.create_bucket(Bucket=self._bucket)
            self._bucket_ready = True

    def put_json(self, key: str, obj: Any) -> None:
        self.ensure_bucket()
        body = json.dumps(obj).encode("utf-8")
        self._client.put_object(
            Bucket=self._bucket,
            Key=key,
            Body=body,
            ContentType="application/json",
        )

    def get_json(self, key: str) -> Optional[Any]:
        """Parsed object at ``key``, or None when it does not exist."""
        self.ensure_bucket()
        try:
            response = self._client.get_object(Bucket=self._bucket, Key=key)
        except ClientError as e:
            if is_not_found(e):
                return None
            raise
        raw = response["Body"].read()
        return json.loads(raw.decode("utf-8"))

    def list_keys(self, prefix: str) -> List[str]:
        self.ensure_bucket()
        keys: List[str] = []
        paginator = self._client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=self._bucket, Prefix=prefix):
            for obj in page.get("Contents", []):
                if obj.get("Key"):
                    keys.append(obj["Key"])
        return keys

    def delete(self, key: str) -> None:
        """Remove ``key``. A missing key is not an error."""
        try:
            self._client.delete_object(Bucket=self._bucket, Key=key)
        except ClientError as e:
            if is_not_found(e):
                return
            raise

    def ping(self) -> None:
        """Raise if the bucket cannot be reached."""
        self._client.head_bucket(Bucket=self._bucket)
