"""Models for upload relay results."""

from pydantic import BaseModel


class UploadResult(BaseModel):
    """Envelope returned by the upload relay; callers branch on ``success``."""

    success: bool
    url: str | None = None
    error: str | None = None

    @classmethod
    def stored(cls, url: str) -> "UploadResult":
        return cls(success=True, url=url)

    @classmethod
    def failed(cls, error: str) -> "UploadResult":
        return cls(success=False, error=error)

    def to_payload(self) -> dict[str, object]:
        """Return the envelope without the unused branch."""
        return self.model_dump(exclude_none=True)
