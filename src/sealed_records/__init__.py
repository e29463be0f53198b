# Sealed Records - Main Package
#
# Authenticated encryption for sensitive JSON payloads in transit between
# the records source and the server-side consumer.

__version__ = "0.1.0"
__author__ = "Sealed Records Team"
__description__ = "Authenticated-encryption transport for sensitive records"

from .codec import (
    AuthenticatedCodec,
    AuthenticationError,
    CodecError,
    EncryptionError,
    FormatError,
    open_envelope,
    seal,
)

__all__ = [
    "__version__",
    "AuthenticatedCodec",
    "AuthenticationError",
    "CodecError",
    "EncryptionError",
    "FormatError",
    "open_envelope",
    "seal",
]
