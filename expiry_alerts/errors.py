from __future__ import annotations


class JobError(Exception):
    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message

    def to_log_extra(self) -> dict[str, str]:
        return {"error_code": self.code, "error": self.message}


class CredentialError(JobError):
    """Service account input is absent or unusable; raised before any I/O."""


class ConfigurationError(JobError):
    pass
