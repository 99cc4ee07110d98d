"""The single trust anchor for signing-key authentication.

The anchor is compiled in: there is exactly one, it cannot be replaced at
runtime, and rotating it requires a new release.
"""
from __future__ import annotations

from dataclasses import dataclass

from .rsa_raw import PublicKey


@dataclass(frozen=True)
class RootKeyAnchor:
    kid: bytes
    modulus: bytes
    exponent: bytes

    def public_key(self) -> PublicKey:
        return PublicKey(self.modulus, self.exponent)


_ROOT_KEY = RootKeyAnchor(
    kid=b"ADU.200702.R",
    modulus=bytes.fromhex(
        "00d5422eaf1154a3506587a24d5bba1afba932dfe9995f0545c8afbd351d89e8"
        "272758a3a8eec5c51e4ff792a612067d3d7db007f62c7fde6d2af5bc49bc15ef"
        "f081cb3f884f271d8871286008b619d2d239d0051f3c768671bb5958bcb1887b"
        "ab5628bf3173443210fd3dd3965cff4e5cb36bff8b849b8b80b849d07dfad640"
        "58764dc0722775cb9a2f9bb49f0f25f11cc51b0b5a307d2fb8efa7265853afd5"
        "1d5501510de91ba20f3fd7e91d2041a6e6140aaefef21c2ad6e4047bf6147eec"
        "0f9783fa58fa813621b9a32bfad9610b1a94f7c1be7f40144ac9fa357fef6670"
        "00b1fddbd7610d3b58746794897576967c9187d28e1197ee7b876c9a2f45d865"
        "3f5270982acbc80463f5c947cf70f4ed64a774a5238fb6edf71cd3b01c645712"
        "5aa981841fa0e7501996b482b1ac48e3e13282cb401facc459bc10345182f928"
        "8da81e9bf5794575b2dc9a114308be61cc9ac4cb7736ff83dda8714f518e0e7b"
        "4dfa79988dbefc827e4048a91201a8d97ef3a51bf1fb90773e408718c9abd9f7"
        "79"
    ),
    exponent=bytes.fromhex("010001"),
)


def root_key() -> RootKeyAnchor:
    return _ROOT_KEY


__all__ = ["RootKeyAnchor", "root_key"]
