"""Asset map helpers for host build statistics."""

from collections.abc import Mapping, Sequence


ChunkFiles = str | Sequence[str]


def _main_file(value: ChunkFiles) -> str | None:
    """Get the main filename of a chunk (the first one for multi-file chunks)."""
    if isinstance(value, str):
        return value
    return value[0] if value else None


def build_asset_map(
    assets_by_chunk_name: Mapping[str, ChunkFiles],
    public_path: str | None = None,
) -> dict[str, str]:
    """Map each chunk name to its emitted filename.

    Args:
        assets_by_chunk_name: Chunk name to filename, or list of filenames.
        public_path: Optional prefix prepended to every filename.

    Returns:
        Chunk name to (prefixed) main filename. Chunks without files are left out.
    """
    assets: dict[str, str] = {}

    for chunk_name, value in assets_by_chunk_name.items():
        filename = _main_file(value)
        if filename is None:
            continue
        if public_path:
            filename = public_path + filename
        assets[chunk_name] = filename

    return assets


def find_asset(
    name: str | None,
    assets_by_chunk_name: Mapping[str, ChunkFiles],
) -> str | None:
    """Find the main filename of a chunk.

    Args:
        name: Chunk name; the first chunk is used when empty.
        assets_by_chunk_name: Chunk name to filename, or list of filenames.

    Returns:
        The chunk's main filename, or None if it does not exist.
    """
    if not name:
        if not assets_by_chunk_name:
            return None
        name = next(iter(assets_by_chunk_name))

    value = assets_by_chunk_name.get(name)
    if not value:
        return None

    return _main_file(value)
