from __future__ import annotations

import base64

from fastapi import FastAPI

from ..crypto.root_key import root_key
from ..jws.arena import SCRATCH_BUFFER_SIZE
from ..outcome import VerificationOutcome
from ..verify import verify_manifest
from .models import RootKeyInfo, VerifyRequest

app = FastAPI(title="Manifest JWS Verifier")


@app.get("/healthz")
def healthz() -> dict:
    return {"ok": True, "scratch_buffer_size": SCRATCH_BUFFER_SIZE}


@app.get("/root-key", response_model=RootKeyInfo)
def get_root_key() -> RootKeyInfo:
    anchor = root_key()
    return RootKeyInfo(
        kid=anchor.kid.decode(),
        modulus_bits=int.from_bytes(anchor.modulus, "big").bit_length(),
        exponent_b64=base64.b64encode(anchor.exponent).decode(),
    )


@app.post("/verify", response_model=VerificationOutcome)
def verify(req: VerifyRequest) -> VerificationOutcome:
    # Each request gets its own arena and JWS buffer; both are mutated during verification
    scratch = bytearray(SCRATCH_BUFFER_SIZE)
    jws = bytearray(req.jws.strip().encode())
    return verify_manifest(req.manifest.encode(), jws, scratch)
