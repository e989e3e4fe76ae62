"""Font lookup for label text.

Templates name fonts the way a stylesheet does: a family such as
``"Norwester Condensed"`` or a comma separated list ending in a generic
family (``"Arial, sans-serif"``). Families are matched against font file
names in the custom font paths first, then the system font directories.
"""

import logging
from collections.abc import Iterator, Sequence
from pathlib import Path

from PIL import ImageFont

logger = logging.getLogger(__name__)

SYSTEM_FONT_DIRS = [
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
    Path.home() / ".fonts",
    Path.home() / ".local/share/fonts",
    Path("/Library/Fonts"),
    Path("/System/Library/Fonts"),
    Path.home() / "Library/Fonts",
    Path("C:/Windows/Fonts"),
]

FONT_SUFFIXES = (".ttf", ".otf")

# File stems to try for well known families, in preference order
FAMILY_FILES = {
    "arial": ["Arial", "LiberationSans-Regular", "DejaVuSans"],
    "helvetica": ["Helvetica", "LiberationSans-Regular", "DejaVuSans"],
    "times new roman": ["Times New Roman", "LiberationSerif-Regular", "DejaVuSerif"],
    "courier new": ["Courier New", "LiberationMono-Regular", "DejaVuSansMono"],
    "norwester condensed": ["norwester", "NorwesterCondensed"],
    "sans-serif": ["DejaVuSans", "LiberationSans-Regular", "Arial", "Helvetica"],
    "serif": ["DejaVuSerif", "LiberationSerif-Regular", "Times New Roman"],
    "monospace": ["DejaVuSansMono", "LiberationMono-Regular", "Courier New"],
}

FontType = ImageFont.FreeTypeFont | ImageFont.ImageFont


def split_family_list(family: str) -> list[str]:
    """Split a stylesheet family list into bare family names.

    >>> split_family_list("'Norwester Condensed', sans-serif")
    ['Norwester Condensed', 'sans-serif']
    """
    names = []
    for part in family.split(","):
        name = part.strip().strip("'\"").strip()
        if name:
            names.append(name)
    return names


def file_stem_candidates(name: str) -> list[str]:
    """File stems that may hold a family, most specific first."""
    candidates = list(FAMILY_FILES.get(name.lower(), []))
    compact = name.replace(" ", "")
    for stem in (name, compact, f"{compact}-Regular"):
        if stem not in candidates:
            candidates.append(stem)
    return candidates


class FontManager:
    """Resolves family names to Pillow fonts.

    Each font directory is indexed once (lower-cased file stem to path);
    resolved families and loaded fonts are cached per manager. When nothing
    matches, Pillow's built-in scalable font is used so text always renders.
    """

    def __init__(self, custom_paths: Sequence[str | Path] | None = None) -> None:
        self._custom_paths = [Path(p) for p in (custom_paths or [])]
        self._fonts: dict[tuple[str, int], FontType] = {}
        self._resolved: dict[str, Path | None] = {}
        self._indexes: dict[Path, dict[str, Path]] = {}

    def get_font(self, family: str, size: int) -> FontType:
        """Load ``family`` (a family list or a font file path) at ``size`` pixels."""
        key = (family, size)
        font = self._fonts.get(key)
        if font is not None:
            return font

        path = self.resolve(family)
        if path is not None:
            try:
                font = ImageFont.truetype(str(path), size)
            except OSError as e:
                logger.warning(f"Failed to load font {path}: {e}")

        if font is None:
            logger.debug(f"Font '{family}' not found, using Pillow default")
            font = ImageFont.load_default(size)

        self._fonts[key] = font
        return font

    def resolve(self, family: str) -> Path | None:
        """Find the font file for a family list or path, or None."""
        if family in self._resolved:
            return self._resolved[family]

        if "/" in family or "\\" in family:
            path = Path(family)
            found = path if path.is_file() else None
        else:
            found = None
            for name in split_family_list(family):
                found = self._find_family(name)
                if found:
                    break

        if found:
            logger.debug(f"Resolved font '{family}' to {found}")
        self._resolved[family] = found
        return found

    def _find_family(self, name: str) -> Path | None:
        stems = [stem.lower() for stem in file_stem_candidates(name)]

        # Custom font files match on their own stem
        for path in self._custom_paths:
            if path.is_file() and path.stem.lower() in stems:
                return path

        for stem in stems:
            for directory in self._font_dirs():
                match = self._index(directory).get(stem)
                if match:
                    return match
        return None

    def _font_dirs(self) -> Iterator[Path]:
        for path in self._custom_paths:
            if path.is_dir():
                yield path
        for path in SYSTEM_FONT_DIRS:
            if path.is_dir():
                yield path

    def _index(self, directory: Path) -> dict[str, Path]:
        index = self._indexes.get(directory)
        if index is not None:
            return index

        index = {}
        try:
            for path in sorted(directory.rglob("*")):
                if path.suffix.lower() in FONT_SUFFIXES:
                    index.setdefault(path.stem.lower(), path)
        except OSError as e:
            logger.warning(f"Cannot scan font directory {directory}: {e}")
        self._indexes[directory] = index
        return index

    def clear_cache(self) -> None:
        """Forget loaded fonts, resolved families and directory indexes."""
        self._fonts.clear()
        self._resolved.clear()
        self._indexes.clear()


_default_manager: FontManager | None = None


def get_font_manager(custom_paths: Sequence[str | Path] | None = None) -> FontManager:
    """Get the shared font manager, or a new one for custom paths."""
    global _default_manager

    if custom_paths:
        return FontManager(custom_paths)

    if _default_manager is None:
        _default_manager = FontManager()

    return _default_manager
