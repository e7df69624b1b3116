"""Supabase Storage object store."""

from dataclasses import dataclass

from supabase import Client, create_client

from nutrition_relay.services.uploads import ObjectStore


@dataclass
class SupabaseObjectStore(ObjectStore):
    """Object store backed by a Supabase Storage bucket."""

    url: str | None
    service_key: str | None
    bucket_name: str | None
    client: Client | None = None

    def _get_client(self) -> Client:
        if self.client is None:
            if not (self.url and self.service_key):
                raise RuntimeError("Supabase URL and service key must be configured")
            self.client = create_client(self.url, self.service_key)
        return self.client

    def put(self, key: str, content: bytes, content_type: str | None = None) -> str:
        """Upload bytes and return the public URL."""
        if not self.bucket_name:
            raise RuntimeError("Storage bucket name must be configured")
        bucket = self._get_client().storage.from_(self.bucket_name)
        file_options = {"content-type": content_type} if content_type else None
        bucket.upload(path=key, file=content, file_options=file_options)
        return bucket.get_public_url(key)
