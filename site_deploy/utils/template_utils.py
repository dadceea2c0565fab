"""Template processing utilities"""

import string
from typing import Any, Dict

from ..templates import load_template


def render_template(template: str,
                    variables: Dict[str, Any],
                    safe: bool = False) -> str:
    """
    Render template with variables

    Args:
        template: Template string ($name placeholders, $$ for a literal $)
        variables: Variables to substitute
        safe: Use safe substitution (ignore missing vars)

    Returns:
        Rendered string
    """
    tmpl = string.Template(template)

    if safe:
        return tmpl.safe_substitute(variables)
    else:
        return tmpl.substitute(variables)


def render_builtin(category: str, name: str, **variables) -> str:
    """Load a built-in template and render it"""
    return render_template(load_template(category, name), variables)
