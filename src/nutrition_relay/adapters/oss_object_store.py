"""Alibaba Cloud OSS object store."""

from dataclasses import dataclass
from urllib.parse import quote

import oss2

from nutrition_relay.services.uploads import ObjectStore


@dataclass
class OssObjectStore(ObjectStore):
    """Object store backed by an OSS bucket."""

    region: str | None
    access_key_id: str | None
    access_key_secret: str | None
    bucket_name: str | None
    bucket: oss2.Bucket | None = None

    @property
    def endpoint_host(self) -> str:
        region = self.region or ""
        if not region.startswith("oss-"):
            region = f"oss-{region}"
        return f"{region}.aliyuncs.com"

    def _get_bucket(self) -> oss2.Bucket:
        if self.bucket is None:
            if not (self.access_key_id and self.access_key_secret):
                raise RuntimeError("OSS access key id and secret must be configured")
            if not (self.region and self.bucket_name):
                raise RuntimeError("OSS region and bucket name must be configured")
            auth = oss2.Auth(self.access_key_id, self.access_key_secret)
            self.bucket = oss2.Bucket(
                auth, f"https://{self.endpoint_host}", self.bucket_name
            )
        return self.bucket

    def put(self, key: str, content: bytes, content_type: str | None = None) -> str:
        """Upload bytes and return the object URL."""
        headers = {"Content-Type": content_type} if content_type else None
        self._get_bucket().put_object(key, content, headers=headers)
        return self.object_url(key)

    def object_url(self, key: str) -> str:
        """Return the virtual-hosted URL for ``key``."""
        return f"https://{self.bucket_name}.{self.endpoint_host}/{quote(key)}"
