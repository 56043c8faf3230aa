"""Compact encoding of tile coordinate sets.

Used by the save layer to store the explored-tile set of a map without writing
one flag per cell.

Format strategy:
  - Input: semicolon separated 'x,y' pairs (unordered)
  - We sort coordinates, delta-encode x and y separately, prefix with 'D:' marker.
  - If compressed payload is not shorter than raw, we return the raw source.

Compressed grammar (simple):
  D:x0,y0|dx1,dy1|dx2,dy2|...

Limitations:
  - Assumes non-negative integer coordinates.
  - Malformed input raises ``ValueError``; a corrupted save must not decode to
    a silently different map.
"""

from __future__ import annotations

from typing import Iterable, List, Tuple

Coord = Tuple[int, int]


def coords_to_raw(coords: Iterable[Coord]) -> str:
    return ";".join(f"{x},{y}" for x, y in coords)


def raw_to_coords(raw: str) -> List[Coord]:
    coords: List[Coord] = []
    if not raw:
        return coords
    for part in raw.split(";"):
        if not part:
            continue
        x_s, y_s = part.split(",")
        coords.append((int(x_s), int(y_s)))
    return coords


def compress_tiles(raw: str) -> str:
    """Return compressed representation of a semicolon ``x,y`` list.

    The compressor sorts coordinates, delta-encodes successive x and y values
    independently, and prefixes with ``D:``. If the encoded payload is not
    shorter than the original, the original string is returned unchanged.

    Args:
        raw: Semicolon separated list of ``x,y`` integer pairs (e.g. ``"1,2;3,4"``).

    Returns:
        Compressed string starting with ``D:`` or the original input if no
        size benefit.
    """
    if not raw or ";" not in raw:
        return raw
    coords = sorted(raw_to_coords(raw))
    if not coords:
        return ""
    pieces = []
    prev_x, prev_y = None, None
    for x, y in coords:
        if prev_x is None:
            pieces.append(f"{x},{y}")
        else:
            pieces.append(f"{x-prev_x},{y-prev_y}")
        prev_x, prev_y = x, y
    compressed = "D:" + "|".join(pieces)
    return compressed if len(compressed) < len(raw) else raw


def decompress_tiles(data: str) -> str:
    """Inverse of :func:`compress_tiles`.

    Reconstructs the semicolon separated coordinate list from a ``D:``
    delta-encoded string. Input without the ``D:`` marker is returned unchanged.
    """
    if not data or not data.startswith("D:"):
        return data
    body = data[2:]
    coords = []
    prev_x, prev_y = None, None
    for token in body.split("|"):
        x_s, y_s = token.split(",")
        dx, dy = int(x_s), int(y_s)
        if prev_x is None:
            x, y = dx, dy
        else:
            x, y = prev_x + dx, prev_y + dy
        coords.append(f"{x},{y}")
        prev_x, prev_y = x, y
    return ";".join(coords)


__all__ = ["compress_tiles", "decompress_tiles", "coords_to_raw", "raw_to_coords"]
