"""
Error taxonomy for the portrait editor.

Classes:
    EditorError: Base class carrying a machine-readable error code
    DecodeError: Source bitmap could not be resolved or decoded
    EncodeError: Output bitmap could not be serialized on commit
    SessionClosedError: Operation attempted on a closed session
"""


class EditorError(Exception):
    """Base error for the editing engine."""

    default_code = "UNKNOWN"

    def __init__(self, message: str, code: str = ""):
        super().__init__(message)
        self.code = code or self.default_code


class DecodeError(EditorError):
    """Source bitmap is unreadable (corrupt, unsupported or unresolvable)."""

    default_code = "DECODE_FAILED"


class EncodeError(EditorError):
    """Commit serialization failed; the session stays open for a retry."""

    default_code = "ENCODE_FAILED"


class SessionClosedError(EditorError):
    """The session was already committed or cancelled."""

    default_code = "SESSION_CLOSED"
