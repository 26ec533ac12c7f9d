import io

from starlette.datastructures import Headers, UploadFile

# Aligned to a UTC day boundary so minute/hour/day windows all start together.
DAY_ALIGNED_EPOCH = 19675 * 86400.0


class FakeClock:
    """Injectable clock for window arithmetic."""

    def __init__(self, start: float = DAY_ALIGNED_EPOCH) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_upload(
    data: bytes,
    filename: str = "photo.jpg",
    content_type: str = "image/jpeg",
) -> UploadFile:
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )
