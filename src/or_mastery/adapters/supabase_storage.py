"""Supabase Storage adapter."""

from dataclasses import dataclass

from supabase import Client

from or_mastery.adapters.supabase_support import remote_call
from or_mastery.services.media import ObjectStorage


@dataclass
class SupabaseStorage(ObjectStorage):
    """Object storage backed by Supabase Storage buckets."""

    client: Client

    def upload(  # noqa: PLR0913
        self, bucket: str, key: str, content: bytes, content_type: str, upsert: bool
    ) -> None:
        """Upload bytes to a bucket key."""
        with remote_call("upload"):
            self.client.storage.from_(bucket).upload(
                path=key,
                file=content,
                file_options={
                    "content-type": content_type,
                    "upsert": "true" if upsert else "false",
                },
            )

    def public_url(self, bucket: str, key: str) -> str:
        """Return the public URL for a bucket key."""
        with remote_call("public url"):
            url = self.client.storage.from_(bucket).get_public_url(key)
        return url.rstrip("?")
