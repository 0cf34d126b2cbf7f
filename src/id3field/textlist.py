from typing import Iterable, Iterator, List, Optional, Tuple

from .constants import TextEncoding
from .encoding import ConversionResult, convert, encode, is_narrow, terminator, to_narrow, to_wide
from .errors import IndexOutOfRange


class TextItemList:
    """Ordered text items sharing one encoding.

    Items are kept in insertion order, which is the order they are rendered
    in. While the list's encoding is narrow every item is narrow as well;
    items added to a narrow list are narrowed on the way in.
    """

    def __init__(self, encoding: TextEncoding = TextEncoding.LATIN1,
                 items: Optional[Iterable[str]] = None):
        self.__encoding = TextEncoding(encoding)
        self.__items: List[str] = []
        if items is not None:
            for item in items:
                self.append(item)

    def __len__(self):
        return len(self.__items)

    def __iter__(self) -> Iterator[str]:
        return iter(self.__items)

    def __getitem__(self, index: int) -> str:
        if not 0 <= index < len(self.__items):
            raise IndexOutOfRange(index, len(self.__items))
        return self.__items[index]

    def __eq__(self, other):
        if not isinstance(other, TextItemList):
            return NotImplemented
        return self.__encoding == other.encoding and self.__items == list(other)

    def __repr__(self):
        return f'TextItemList({self.__encoding.name}, {self.__items!r})'

    @property
    def encoding(self) -> TextEncoding:
        return self.__encoding

    @property
    def count(self) -> int:
        return len(self.__items)

    @property
    def size(self) -> int:
        """Number of characters across all items."""
        return sum(len(item) for item in self.__items)

    @property
    def items(self) -> Tuple[str, ...]:
        return tuple(self.__items)

    def _accept(self, text: str) -> ConversionResult:
        if not isinstance(text, str):
            raise TypeError(f"Text items must be str, not {type(text).__name__}")
        if is_narrow(self.__encoding):
            return to_narrow(text)
        return to_wide(text)

    def append(self, text: str) -> bool:
        """Append an item.

        Returns:
            True if the item had to be narrowed lossily
        """
        result = self._accept(text)
        self.__items.append(result.text)
        return result.lossy

    def replace(self, text: str) -> bool:
        """Replace all items with text (no items at all if text is empty)."""
        result = self._accept(text)
        self.__items = [result.text] if result.text else []
        return result.lossy

    def clear(self) -> None:
        self.__items = []

    def set_encoding(self, encoding: TextEncoding) -> bool:
        """Convert every item to encoding.

        Returns:
            True if any character was replaced during the conversion
        """
        encoding = TextEncoding(encoding)
        lossy = False
        converted = []
        for item in self.__items:
            result = convert(item, self.__encoding, encoding)
            lossy = lossy or result.lossy
            converted.append(result.text)
        self.__items = converted
        self.__encoding = encoding
        return lossy

    def render(self, cstr: bool = False) -> bytes:
        """Return the wire form: items separated by terminators.

        Args:
            cstr: Also terminate the last item
        """
        term = terminator(self.__encoding)
        data = term.join(encode(item, self.__encoding) for item in self.__items)
        if cstr:
            data += term
        return data

    def copy(self) -> 'TextItemList':
        other = TextItemList(self.__encoding)
        other.__items = list(self.__items)
        return other
