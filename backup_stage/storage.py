"""Back files up to S3-compatible object storage (GCS interoperability, Swift s3api, AWS)."""

import hashlib
from pathlib import Path
from typing import Optional, Sequence
from urllib.parse import quote

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from rich.console import Console
from rich.markup import escape

from .errors import BackupUploadError, ConfigLoadError
from .models import BackupDescriptor, StageConfig

console = Console(stderr=True)

HASH_CHUNK_SIZE = 1024 * 1024


def get_s3_client(config: StageConfig):
    """Create an S3 client for the configured endpoint.

    GCS interoperability needs signature version 's3' (v2); set
    SIGNATURE_VERSION accordingly.
    """
    try:
        return boto3.client(
            "s3",
            aws_access_key_id=config.access_key_id,
            aws_secret_access_key=config.secret_access_key,
            endpoint_url=config.endpoint_url,
            config=Config(signature_version=config.signature_version),
        )
    except ValueError as e:
        raise ConfigLoadError(f"Invalid API_URL {config.endpoint_url!r}: {e}") from e


def file_md5(path: Path) -> str:
    digest = hashlib.md5()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(HASH_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


class CloudClient:
    """Uploads files into a single bucket, one folder per owner."""

    def __init__(self, s3, bucket_name: str):
        self.s3 = s3
        self.bucket_name = bucket_name

    @classmethod
    def from_config(cls, config: StageConfig) -> "CloudClient":
        return cls(get_s3_client(config), config.bucket_name)

    def object_key(self, path: str, owner_id: str) -> str:
        return f"{owner_id}/{Path(path).name}"

    def object_url(self, key: str) -> str:
        endpoint = self.s3.meta.endpoint_url.rstrip("/")
        return f"{endpoint}/{self.bucket_name}/{quote(key)}"

    def upload(self, path: str, owner_id: str) -> BackupDescriptor:
        """Upload one file and describe where it went."""
        local_path = Path(path)
        key = self.object_key(path, owner_id)
        size = local_path.stat().st_size
        md5 = file_md5(local_path)
        console.print(escape(f"Uploading {local_path} to s3://{self.bucket_name}/{key}..."))
        with open(local_path, "rb") as f:
            self.s3.put_object(Bucket=self.bucket_name, Key=key, Body=f)
        return BackupDescriptor(url=self.object_url(key), hash=md5, size=size)

    def backup(
        self, paths: Optional[Sequence[str]], owner_id: str
    ) -> list[BackupDescriptor]:
        """Upload every path under owner_id, in order.

        All or nothing from the caller's side: the first failure raises
        BackupUploadError. Objects uploaded before it stay in the bucket and
        are listed on the error.
        """
        if paths is None:
            raise TypeError("paths must be a sequence, got None")

        backups: list[BackupDescriptor] = []
        seen_keys: dict[str, str] = {}
        for path in paths:
            key = self.object_key(path, owner_id)
            if key in seen_keys and seen_keys[key] != path:
                console.print(
                    f"[yellow]Warning:[/yellow] "
                    + escape(f"{key} was already uploaded from {seen_keys[key]}; {path} overwrites it")
                )
            seen_keys[key] = path
            try:
                backups.append(self.upload(path, owner_id))
            except (ClientError, BotoCoreError, OSError) as e:
                orphans = ", ".join(b.url for b in backups) or "none"
                raise BackupUploadError(
                    f"Error backing up files {list(paths)}: {path}: {e} "
                    f"(already uploaded: {orphans})",
                    uploaded=backups,
                ) from e
        return backups
