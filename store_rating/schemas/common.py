"""공통 Pydantic 응답 스키마 정의.

Common Pydantic response schemas shared across API domains.
"""

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """단순 메시지 응답 스키마.

    Generic message response for operations without a resource body
    (e.g. deletions).

    Attributes:
        message: 결과 메시지 (Result message)
    """

    message: str
