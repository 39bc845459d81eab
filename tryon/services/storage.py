"""
Storage Service
Handles upload bytes - supports Google Cloud Storage, S3, and local filesystem.
"""

import logging
from pathlib import Path

from tryon.core.config import Settings

logger = logging.getLogger(__name__)


class StorageService:
    """Service for file storage operations."""

    def __init__(self, settings: Settings):
        # Priority: GCS > Local > S3
        self.use_gcs = settings.USE_GCS
        self.use_local = settings.USE_LOCAL_STORAGE and not self.use_gcs

        if self.use_gcs:
            from google.cloud import storage
            self.gcs_client = storage.Client(project=settings.GCP_PROJECT_ID or None)
            self.bucket = self.gcs_client.bucket(settings.GCS_BUCKET_UPLOADS)
            logger.info(f"[Storage] Using Google Cloud Storage: {settings.GCS_BUCKET_UPLOADS}")

        elif self.use_local:
            self.base_path = Path(settings.LOCAL_STORAGE_PATH)
            self.base_path.mkdir(parents=True, exist_ok=True)
            logger.info(f"[Storage] Using local storage: {self.base_path}")

        else:
            import boto3
            from botocore.config import Config
            self.s3 = boto3.client(
                "s3",
                endpoint_url=settings.S3_ENDPOINT or None,
                aws_access_key_id=settings.S3_ACCESS_KEY or None,
                aws_secret_access_key=settings.S3_SECRET_KEY or None,
                region_name=settings.S3_REGION,
                config=Config(signature_version="s3v4")
            )
            self.bucket_name = settings.S3_BUCKET
            logger.info(f"[Storage] Using S3: {self.bucket_name}")

    @property
    def backend(self) -> str:
        if self.use_gcs:
            return "gcs"
        if self.use_local:
            return "local"
        return "s3"

    def upload_bytes(self, data: bytes, path: str, content_type: str = "image/jpeg") -> str:
        """Store bytes under path and return the path."""
        if self.use_gcs:
            blob = self.bucket.blob(path)
            blob.upload_from_string(data, content_type=content_type)
        elif self.use_local:
            file_path = self.base_path / path
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_bytes(data)
        else:
            self.s3.put_object(
                Bucket=self.bucket_name,
                Key=path,
                Body=data,
                ContentType=content_type
            )
        return path

    def get_file(self, path: str) -> bytes:
        """Get file contents. Raises FileNotFoundError when missing."""
        if self.use_gcs:
            blob = self.bucket.blob(path)
            if not blob.exists():
                raise FileNotFoundError(path)
            return blob.download_as_bytes()
        elif self.use_local:
            file_path = self.base_path / path
            if not file_path.is_file():
                raise FileNotFoundError(path)
            return file_path.read_bytes()
        else:
            try:
                response = self.s3.get_object(Bucket=self.bucket_name, Key=path)
            except self.s3.exceptions.NoSuchKey:
                raise FileNotFoundError(path)
            return response["Body"].read()

    def health_check(self) -> str:
        """Return "ok" or an error string."""
        try:
            if self.use_gcs:
                self.bucket.exists()
            elif self.use_local:
                if not self.base_path.is_dir():
                    return f"error: {self.base_path} missing"
            else:
                self.s3.head_bucket(Bucket=self.bucket_name)
            return "ok"
        except Exception as e:
            return f"error: {e}"
