from __future__ import annotations

from typing import Any


class CwaServiceError(Exception):
    """Base for failures that map onto a JSON error response."""

    status_code: int = 500
    error: str = "伺服器錯誤"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict:
        return {"error": self.error, "message": self.message}


class ConfigurationError(CwaServiceError):
    status_code = 500
    error = "伺服器設定錯誤"


class UnknownLocalityError(CwaServiceError):
    status_code = 400
    error = "參數錯誤"

    def __init__(self, key: str, available: tuple[str, ...]) -> None:
        super().__init__("找不到此縣市，請檢查拼字或使用正確的縣市代碼")
        self.key = key
        self.available = available

    def to_payload(self) -> dict:
        payload = super().to_payload()
        payload["availableCities"] = list(self.available)
        return payload


class UpstreamError(CwaServiceError):
    """CWA call failed.

    ``kind`` is ``"http"`` when the upstream answered with an error status
    (``status_code`` mirrors it) and ``"transport"`` when no usable response
    arrived at all (connect errors, timeouts, undecodable bodies).
    """

    error = "CWA API 錯誤"

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 502,
        kind: str = "transport",
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.kind = kind
        self.details = details

    def to_payload(self) -> dict:
        payload = super().to_payload()
        payload["details"] = self.details
        return payload


class EmptyLocationError(CwaServiceError):
    status_code = 404
    error = "查無資料"

    def __init__(self, location_name: str) -> None:
        super().__init__(f"無法取得 {location_name} 天氣資料")
        self.location_name = location_name
