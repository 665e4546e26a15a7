"""
ID 생성: request_id

규칙:
- 요청마다 새로 발급 (결정론 X)
- 로그 상관관계 추적용, 저장하지 않음
"""

import uuid
from datetime import UTC, datetime


def generate_request_id() -> str:
    """
    Request ID 생성.

    고유성 보장: UUID v4
    포맷: REQ-{timestamp}-{uuid[:8]}

    Returns:
        request_id 문자열
    """
    now = datetime.now(UTC)
    timestamp = now.strftime("%Y%m%d%H%M%S")
    unique = uuid.uuid4().hex[:8]

    return f"REQ-{timestamp}-{unique}"
