"""Image contexts backed by Pillow."""
import os
from contextlib import contextmanager
from io import BytesIO
from typing import Iterator

from resourcescope.errors import AcquisitionError
from resourcescope.settings import ScopeSettings
from resourcescope.contexts.scoped_resource import ScopedResource

FORMATS_BY_EXTENSION = {
    'jpeg': 'JPEG',
    'jpg': 'JPEG',
    'png': 'PNG',
    'gif': 'GIF',
    'bmp': 'BMP',
}


def require_pillow():
    try:
        from PIL import Image as PILImage
    except ImportError as error:
        raise AcquisitionError('The image context requires that Pillow is installed.') from error
    return PILImage


class Image(ScopedResource):
    """
    Decodes the image at `path` and passes the `PIL.Image.Image` to the body.
    The decoder is chosen from the file extension; unrecognized extensions
    fall back to detection from the file contents. Pixel data is loaded
    eagerly, so a corrupt file fails before the body runs.
    """
    path: str

    def __init__(self, path: str | os.PathLike, settings: ScopeSettings | None = None):
        super().__init__(settings)
        self.path = os.fspath(path)

    @contextmanager
    def scope(self) -> Iterator:
        require_pillow()
        with super().scope() as image:
            yield image

    def acquire(self):
        PILImage = require_pillow()
        extension = os.path.splitext(self.path)[1].lstrip('.').lower()
        image_format = FORMATS_BY_EXTENSION.get(extension)
        image = None
        try:
            if image_format is None:
                with open(self.path, 'rb') as file:
                    image = PILImage.open(BytesIO(file.read()))
            else:
                image = PILImage.open(self.path, formats=[image_format])
            image.load()
        except (OSError, ValueError, SyntaxError, PILImage.DecompressionBombError) as error:
            if image is not None:
                image.close()
            raise AcquisitionError(f'[{self.path}] could not be opened, empty handle returned.') from error
        return image

    def dispose(self, image) -> None:
        self.best_effort(image.close, 'close')

    def __repr__(self) -> str:
        return f"{type(self).__name__}('{self.path}')"


class NewImage(ScopedResource):
    """A blank canvas of the given size, mode and background color."""

    def __init__(
        self,
        width: int,
        height: int,
        mode: str = 'RGB',
        color: int | str | tuple[int, ...] = 0,
        settings: ScopeSettings | None = None,
    ):
        super().__init__(settings)
        self.width = width
        self.height = height
        self.mode = mode
        self.color = color

    @contextmanager
    def scope(self) -> Iterator:
        require_pillow()
        with super().scope() as image:
            yield image

    def acquire(self):
        PILImage = require_pillow()
        if self.width <= 0 or self.height <= 0:
            raise AcquisitionError(f'Image dimensions must be positive, got {self.width}x{self.height}.')
        try:
            return PILImage.new(self.mode, (self.width, self.height), self.color)
        except (ValueError, TypeError, KeyError) as error:
            raise AcquisitionError(f'A {self.mode} image of {self.width}x{self.height} could not be created.') from error

    def dispose(self, image) -> None:
        self.best_effort(image.close, 'close')

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.width}, {self.height}, '{self.mode}')"
