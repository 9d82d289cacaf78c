"""Supabase Storage adapter for publishing rendered images."""

from dataclasses import dataclass

from supabase import Client

from renovation_preview.services.composites import BlobStorage


@dataclass
class SupabaseBlobStorage(BlobStorage):
    """Uploads objects to a public Supabase Storage bucket."""

    client: Client
    bucket: str

    def put(self, key: str, data: bytes, content_type: str) -> str:
        """Upload bytes and return the object's public URL."""
        bucket = self.client.storage.from_(self.bucket)
        bucket.upload(
            path=key,
            file=data,
            file_options={"content-type": content_type, "cache-control": "3600"},
        )
        return bucket.get_public_url(key)
