"""헤어 오버레이 예외 계층"""

from typing import Optional


class HairOverlayException(Exception):
    """패키지 공통 기본 예외"""
    pass


class InvalidImageError(HairOverlayException):
    """numpy 이미지 배열이 아니거나 비어 있는 입력"""
    pass


class ConfigurationError(HairOverlayException):
    """설정 값 검증 실패 (config.yaml, 슬라이더, 트래커 초기화)"""
    pass


class LandmarkSetError(HairOverlayException):
    """랜드마크 세트가 기준점 인덱스를 포함하지 못하는 경우"""
    pass


class AssetLoadError(HairOverlayException):
    """
    헤어 에셋 이미지 로드 실패

    Attributes:
        path: 로드하려던 파일 경로 (알 수 없으면 None)
    """

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class CameraError(HairOverlayException):
    """
    카메라 열기/읽기 실패

    Attributes:
        device: 카메라 디바이스 인덱스
    """

    def __init__(self, message: str, device: Optional[int] = None):
        super().__init__(message)
        self.device = device

    def __str__(self):
        message = super().__str__()
        if self.device is None:
            return message
        return f"{message} (device {self.device})"
