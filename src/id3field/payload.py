import logging
from typing import Optional

from .errors import IoError

logger = logging.getLogger(__name__)


class BinaryPayload:
    """An owned byte buffer.

    The buffer is copied on the way in and on the way out, so no two
    payloads (and no caller) ever share storage. Zero bytes are ordinary
    content; there is no terminator.
    """

    def __init__(self, data=b''):
        self.__data = bytearray(data)

    def __len__(self):
        return len(self.__data)

    def __eq__(self, other):
        if not isinstance(other, BinaryPayload):
            return NotImplemented
        return self.__data == other.__data

    def __repr__(self):
        return f'BinaryPayload({bytes(self.__data)!r})'

    @property
    def size(self) -> int:
        return len(self.__data)

    def set(self, data, size: Optional[int] = None) -> int:
        """Replace the buffer with data (or its first size bytes).

        Returns:
            Number of bytes stored
        """
        if isinstance(data, (list, tuple)):
            data = bytes(data)
        data = memoryview(data).cast('B')
        if size is not None:
            if size < 0:
                raise ValueError(f"Size cannot be negative: {size}")
            data = data[:size]
        self.__data = bytearray(data)
        return len(self.__data)

    def get(self, size: Optional[int] = None) -> bytes:
        """Return a copy of the first size bytes (all bytes by default)."""
        if size is None:
            return bytes(self.__data)
        return bytes(self.__data[:max(size, 0)])

    def readinto(self, buffer, size: Optional[int] = None) -> int:
        """Copy up to size bytes (default len(buffer)) into buffer.

        Returns:
            Number of bytes actually written
        """
        target = memoryview(buffer).cast('B')
        limit = len(target) if size is None else min(size, len(target))
        count = max(min(limit, len(self.__data)), 0)
        target[:count] = self.__data[:count]
        return count

    def view(self) -> memoryview:
        """Return a read-only view of the current contents."""
        return memoryview(self.__data).toreadonly()

    def clear(self) -> None:
        self.__data = bytearray()

    def copy(self) -> 'BinaryPayload':
        return BinaryPayload(self.__data)

    def from_file(self, filename, buffer_size: Optional[int] = None) -> int:
        """Replace the buffer with the full contents of a file.

        Args:
            filename: Path of the file to read
            buffer_size: Optional buffer size in bytes. If None, uses system default.

        Returns:
            Number of bytes read

        Raises:
            IoError: If the file cannot be read
        """
        try:
            with open(filename, 'rb', buffering=buffer_size or -1) as f:
                data = f.read()
        except OSError as e:
            raise IoError(f"Error reading {filename}: {e}") from e

        self.__data = bytearray(data)
        logger.debug(f"Read {len(data)} bytes from {filename}")
        return len(data)

    def to_file(self, filename, buffer_size: Optional[int] = None) -> int:
        """Write the buffer to a file, replacing its contents.

        Args:
            filename: Path of the file to write
            buffer_size: Optional buffer size in bytes. If None, uses system default.

        Returns:
            Number of bytes written

        Raises:
            IoError: If the file cannot be written
        """
        try:
            with open(filename, 'wb', buffering=buffer_size or -1) as f:
                f.write(self.__data)
        except OSError as e:
            raise IoError(f"Error writing {filename}: {e}") from e

        logger.debug(f"Wrote {len(self.__data)} bytes to {filename}")
        return len(self.__data)
