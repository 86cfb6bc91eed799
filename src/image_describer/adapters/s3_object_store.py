"""S3 object store for uploaded images."""

from dataclasses import dataclass
from typing import Any

import boto3

from image_describer.services.images import ObjectStore


@dataclass
class S3ObjectStore(ObjectStore):
    """Object store backed by an S3 bucket."""

    client: Any
    bucket: str
    region: str

    @classmethod
    def create(
        cls,
        bucket: str,
        region: str,
        access_key_id: str,
        secret_access_key: str,
    ) -> "S3ObjectStore":
        """Create an S3 object store with explicit credentials."""
        client = boto3.client(
            "s3",
            region_name=region,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
        )
        return cls(client=client, bucket=bucket, region=region)

    def put_object(
        self,
        key: str,
        body: bytes,
        content_type: str | None,
        metadata: dict[str, str],
    ) -> None:
        """Upload bytes to the bucket under the key."""
        params: dict[str, object] = {
            "Bucket": self.bucket,
            "Key": key,
            "Body": body,
            "Metadata": metadata,
        }
        if content_type:
            params["ContentType"] = content_type
        self.client.put_object(**params)

    def public_url(self, key: str) -> str:
        """Return the virtual-hosted style URL for the key."""
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"
