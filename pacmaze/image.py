"""In-memory 32-bit pixel images and colour conversion for low-depth visuals."""

from __future__ import annotations

BITS_PER_PIXEL = 32
_BYTES_PER_PIXEL = BITS_PER_PIXEL // 8
_PIXEL_MASK = 0xFFFFFFFF


class Image:
    """A ZPixmap-style image: rows of 32-bit pixels in a flat byte buffer."""

    def __init__(self, width: int, height: int, big_endian: bool = False) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"image size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.big_endian = big_endian
        self.bpp = BITS_PER_PIXEL
        self.size_line = width * _BYTES_PER_PIXEL
        self.data = bytearray(self.size_line * height)

    @property
    def byte_order(self) -> str:
        return "big" if self.big_endian else "little"

    def _offset(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")
        return y * self.size_line + x * _BYTES_PER_PIXEL

    def put_pixel(self, x: int, y: int, color: int) -> None:
        """Store a 32-bit colour at (x, y) in the image's byte order."""
        offset = self._offset(x, y)
        self.data[offset:offset + _BYTES_PER_PIXEL] = (color & _PIXEL_MASK).to_bytes(
            _BYTES_PER_PIXEL, self.byte_order
        )

    def get_pixel(self, x: int, y: int) -> int:
        """Return the unsigned 32-bit colour stored at (x, y)."""
        offset = self._offset(x, y)
        return int.from_bytes(
            self.data[offset:offset + _BYTES_PER_PIXEL], self.byte_order
        )

    def row(self, y: int) -> bytes:
        """Return the raw bytes of row y."""
        if not 0 <= y < self.height:
            raise IndexError(f"row {y} outside image of height {self.height}")
        start = y * self.size_line
        return bytes(self.data[start:start + self.size_line])

    def __repr__(self) -> str:
        return (
            f"Image(width={self.width}, height={self.height}, "
            f"big_endian={self.big_endian})"
        )


def _mask_shift_and_bits(mask: int) -> tuple[int, int]:
    if mask <= 0:
        raise ValueError(f"colour mask must be a positive bit mask, got {mask:#x}")
    shift = (mask & -mask).bit_length() - 1
    run = mask >> shift
    bits = ((run + 1) & ~run).bit_length() - 1
    return shift, bits


def channel_shifts(red_mask: int, green_mask: int, blue_mask: int) -> tuple[int, ...]:
    """Return (shift, width) pairs for red, green and blue as one flat 6-tuple."""
    result: list[int] = []
    for mask in (red_mask, green_mask, blue_mask):
        result.extend(_mask_shift_and_bits(mask))
    return tuple(result)


def convert_color(color: int, depth: int, shifts: tuple[int, ...]) -> int:
    """Convert 0xRRGGBB to a pixel value for a visual of the given depth."""
    if depth >= 24:
        return color
    red_shift, red_bits, green_shift, green_bits, blue_shift, blue_bits = shifts
    red = (color >> 8) & 0xFF00
    green = color & 0xFF00
    blue = (color << 8) & 0xFF00
    return (
        ((red >> (16 - red_bits)) << red_shift)
        + ((green >> (16 - green_bits)) << green_shift)
        + ((blue >> (16 - blue_bits)) << blue_shift)
    )