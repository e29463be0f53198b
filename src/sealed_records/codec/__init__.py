# Authenticated Codec
#
# Seals JSON payloads for transit between the records source and the
# server-side consumer. AES-256-GCM with scrypt key derivation.

from .encryption import (
    AuthenticatedCodec,
    EnvelopeParts,
    DEFAULT_SALT,
    derive_key,
    open_envelope,
    seal,
    split_envelope,
)
from .exceptions import (
    AuthenticationError,
    CodecError,
    EncryptionError,
    FormatError,
)

__all__ = [
    "AuthenticatedCodec",
    "EnvelopeParts",
    "DEFAULT_SALT",
    "derive_key",
    "open_envelope",
    "seal",
    "split_envelope",
    "AuthenticationError",
    "CodecError",
    "EncryptionError",
    "FormatError",
]
