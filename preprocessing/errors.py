"""Exception types raised by the image pipeline."""


class ImagePipelineError(Exception):
    """Base class for all pipeline errors."""


class InvalidImageError(ImagePipelineError, ValueError):
    """The input image has zero area or cannot be decoded."""


class OutOfBoundsError(ImagePipelineError, IndexError):
    """A pixel coordinate fell outside the buffer.

    Filters only ever index inside the buffer, so this signals a defect and
    aborts the pipeline invocation that raised it.
    """

    def __init__(self, x: int, y: int, width: int, height: int):
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        super().__init__(
            f"Pixel ({x}, {y}) outside buffer of size {width}x{height}"
        )
