"""Compact JWS splitting, base64 decoding and the scratch arena."""
