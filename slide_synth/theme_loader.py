"""Theme loader for the presentation theme parts."""
from functools import lru_cache
from pathlib import Path
from typing import List

THEMES_DIR = Path(__file__).parent / "themes"


@lru_cache(maxsize=None)
def get_theme_xml(theme: str = "default") -> str:
    """
    Load the theme part (``ppt/theme/theme1.xml``) for the named theme.

    Args:
        theme: Theme name (default, dark, etc.)

    Returns:
        Theme XML as string

    Raises:
        FileNotFoundError: If theme file doesn't exist
        ValueError: If theme name is invalid
    """
    # Validate theme name (security: prevent path traversal)
    if not theme.replace("_", "").replace("-", "").isalnum():
        raise ValueError(f"Invalid theme name: {theme}")

    theme_path = THEMES_DIR / f"{theme}.xml"

    if not theme_path.exists():
        raise FileNotFoundError(
            f"Theme '{theme}' not found. Available themes: {list_available_themes()}"
        )

    with open(theme_path, 'r', encoding='utf-8') as f:
        return f.read()


def list_available_themes() -> List[str]:
    """
    List all available themes.

    Returns:
        Sorted list of theme names
    """
    if not THEMES_DIR.exists():
        return []

    return sorted(f.stem for f in THEMES_DIR.glob("*.xml") if f.is_file())


def validate_theme(theme: str) -> bool:
    """
    Check if a theme exists.

    Args:
        theme: Theme name to validate

    Returns:
        True if theme exists, False otherwise
    """
    try:
        get_theme_xml(theme)
        return True
    except (FileNotFoundError, ValueError):
        return False
