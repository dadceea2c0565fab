# site_deploy/templates/__init__.py
"""Built-in templates for generated patches

Templates use ``string.Template`` placeholders (``$name``); a literal
dollar sign is written ``$$``.
"""

from pathlib import Path

TEMPLATES_DIR = Path(__file__).parent


def load_template(category: str, name: str) -> str:
    """
    Read a packaged template

    Args:
        category: Sub-directory, ``workflows`` or ``config``
        name: File name inside the category

    Returns:
        Template text

    Raises:
        FileNotFoundError: If the package ships no such template
    """
    path = TEMPLATES_DIR / category / name
    if not path.is_file():
        raise FileNotFoundError(f"No built-in template {category}/{name}")
    return path.read_text(encoding="utf-8")
