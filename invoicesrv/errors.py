"""Application errors carrying an HTTP status and a client-facing message."""

from http import HTTPStatus
from typing import Optional

ERR_TYPE_INTERNAL_SERVER = "InternalServerError"
ERR_MSG_INTERNAL_SERVER = "内部サーバーエラーが発生しました。しばらくしてから再度アクセスしてください。"

ERR_TYPE_NOT_FOUND = "NotfoundError"
ERR_MSG_NOT_FOUND = "存在しないデータです"

ERR_TYPE_VALIDATION = "ValidationError"


class AppError(Exception):
    """An error the API reports to clients with its own type, message and status code."""

    def __init__(
        self,
        error_type: str,
        message: str,
        code: int,
        internal: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.error_type = error_type
        self.message = message
        self.code = code
        self.internal = internal

    def __str__(self) -> str:
        return self.message


def not_found(internal: Optional[BaseException] = None) -> AppError:
    """Build the error reported when a requested record does not exist."""
    return AppError(ERR_TYPE_NOT_FOUND, ERR_MSG_NOT_FOUND, HTTPStatus.NOT_FOUND, internal)


def validation_error(cause: str) -> AppError:
    """Build the error reported when the input named by ``cause`` is invalid."""
    return AppError(
        ERR_TYPE_VALIDATION,
        f"{cause}が適切な入力ではないです",
        HTTPStatus.BAD_REQUEST,
    )