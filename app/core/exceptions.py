from typing import Any, Optional


class AppError(Exception):
    """Erreur applicative renvoyée au client sous la forme {message, details}"""

    status_code: int = 500

    def __init__(self, message: str, details: Optional[Any] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        body = {"message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class InsufficientBalanceError(AppError):
    status_code = 400


class EscrowBalanceError(AppError):
    status_code = 500


class DeploymentCreationError(AppError):
    status_code = 500


class DeploymentNotFoundError(AppError):
    status_code = 404
