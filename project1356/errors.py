from typing import Literal

CorruptReason = Literal["empty", "invalid_json", "not_object", "invalid_structure", "cipher"]

EMPTY_RESULT_MESSAGE = (
    "Invalid encrypted data - decryption returned empty result. "
    "Please ensure you copied the complete backup data."
)
GENERIC_DECRYPT_MESSAGE = (
    "Failed to decrypt data. The file may be corrupted or from a different version. "
    "Please ensure you copied the complete backup data without any modifications."
)


class IntegrityFailure(Exception):
    """Stored countdown fields disagree beyond tolerance."""


class EncryptionFailure(Exception):
    pass


class CorruptBackupError(Exception):
    def __init__(self, reason: CorruptReason, message: str = GENERIC_DECRYPT_MESSAGE) -> None:
        super().__init__(message)
        self.reason = reason
        self.message = message


class SetupValidationError(ValueError):
    pass


class CommitmentMissingError(LookupError):
    pass


class GoalNotFoundError(LookupError):
    pass
