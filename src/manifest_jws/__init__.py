"""manifest_jws package: authenticate update manifests against a detached two-level JWS.

The manifest's JWS embeds a signed signing key (``sjwk``) that is itself
checked against a single compiled-in root key; all decoding happens inside a
caller-supplied scratch arena of at least ``SCRATCH_BUFFER_SIZE`` bytes.
"""
from .errors import ErrorKind, ManifestVerificationError  # noqa: F401
from .jws.arena import SCRATCH_BUFFER_SIZE  # noqa: F401
from .outcome import VerificationOutcome  # noqa: F401
from .verify import ManifestVerifier, verify_manifest  # noqa: F401
