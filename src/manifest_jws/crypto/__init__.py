"""Trust anchor, digest and raw-RSA primitives."""
