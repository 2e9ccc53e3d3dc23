"""트라이/캐치 블록에서 사용할 예외 분류 정의 모듈.

광범위한 Exception 사용을 지양하고, 의도한 예외만 명시적으로 처리하기 위해 사용합니다.
"""

from enum import StrEnum


class ErrorKind(StrEnum):
    """피드 경계 에러 분류

    - MALFORMED_MESSAGE: envelope 불일치 / 숫자 파싱 실패 (normalize에서 None으로 흡수)
    - TRANSPORT_ERROR: 전송 계층 오류 (on_error로 통지, 이후 close → 재연결)
    - CONNECTION_EXHAUSTED: 재연결 한도 초과 (해당 타겟 종료)
    """

    MALFORMED_MESSAGE = "malformed_message"
    TRANSPORT_ERROR = "transport_error"
    CONNECTION_EXHAUSTED = "connection_exhausted"
