"""
Authenticated Codec Exception Classes
"""


class CodecError(Exception):
    """Base exception for seal/open operations"""
    pass


class FormatError(CodecError):
    """Raised when an envelope is structurally malformed"""
    pass


class AuthenticationError(CodecError):
    """Raised when the authentication tag does not verify (tampering or wrong passphrase)"""
    pass


class EncryptionError(CodecError):
    """Raised when the cipher, KDF or random source is unavailable"""
    pass
