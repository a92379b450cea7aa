"""표면 좌우 반전 변환 (scoped guard)"""

from .surface import Surface


class MirrorTransform:
    """
    미러 변환 가드

    begin() 에서 표면 상태를 저장하고 mirror 이면 (width, 0) 이동 후 x 축을 -1 배 한다.
    end() 는 조건 없이 이전 상태로 복원한다. with 문으로 사용하면
    예외/조기 반환을 포함한 모든 경로에서 복원이 보장된다.

    기준 좌표(ReferenceFrame)는 뒤집지 않는다. 스타일 기하는 항상 카메라 원본 좌표로
    작성되고, 반전은 표면 변환이 담당한다.
    """

    def __init__(self, surface: Surface, mirror: bool):
        self.surface = surface
        self.mirror = bool(mirror)
        self._active = False

    def begin(self) -> "MirrorTransform":
        if self._active:
            raise RuntimeError("MirrorTransform already active")
        self.surface.save()
        if self.mirror:
            self.surface.translate(self.surface.width, 0)
            self.surface.scale(-1, 1)
        self._active = True
        return self

    def end(self):
        if not self._active:
            return
        self.surface.restore()
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def __enter__(self) -> "MirrorTransform":
        return self.begin()

    def __exit__(self, exc_type, exc, tb):
        self.end()
        return False


def mirrored(surface: Surface, mirror: bool) -> MirrorTransform:
    """`with mirrored(surface, config.mirror):` 형태의 간편 함수"""
    return MirrorTransform(surface, mirror)
