from __future__ import annotations

from pydantic import BaseModel

from .errors import ErrorKind, ManifestVerificationError


class VerificationOutcome(BaseModel):
    ok: bool
    error: ErrorKind | None = None
    stage: str | None = None  # failing orchestrator step
    detail: str | None = None

    @classmethod
    def success(cls) -> "VerificationOutcome":
        return cls(ok=True)

    @classmethod
    def failure(cls, err: ManifestVerificationError) -> "VerificationOutcome":
        return cls(ok=False, error=err.kind, stage=err.stage, detail=err.detail)
