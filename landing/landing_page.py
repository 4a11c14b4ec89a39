"""Landing page: the site root's index of merged projects."""

import html
from pathlib import Path
from typing import Optional, Sequence

from contracts import ConfigWriteError, Project
from config import settings


PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <style>
        * {{ margin: 0; padding: 0; box-sizing: border-box; }}
        body {{
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
            min-height: 100vh;
            padding: 2rem;
            color: #333;
        }}
        .container {{ max-width: 1200px; margin: 0 auto; }}
        h1 {{ color: white; text-align: center; margin-bottom: 3rem; font-size: 3rem; }}
        .projects-grid {{
            display: grid;
            grid-template-columns: repeat(auto-fill, minmax(300px, 1fr));
            gap: 1.5rem;
        }}
        .project-card {{
            background: white;
            border-radius: 12px;
            padding: 1.5rem;
            box-shadow: 0 4px 6px rgba(0,0,0,0.1);
            text-decoration: none;
            color: inherit;
            display: block;
        }}
        .project-card h2 {{ color: #667eea; font-size: 1.5rem; }}
        .project-link {{ display: inline-block; margin-top: 1rem; color: #667eea; font-weight: bold; }}
        .empty {{ color: white; text-align: center; }}
    </style>
</head>
<body>
    <div class="container">
        <h1>{title}</h1>
{body}
    </div>
</body>
</html>
"""

CARD_TEMPLATE = """            <a href="{href}" class="project-card">
                <h2>{name}</h2>
                <span class="project-link">Open project &rarr;</span>
            </a>"""


def render_landing_page(projects: Sequence[Project], title: Optional[str] = None) -> str:
    """Render the landing page HTML with one card per project.

    Args:
        projects: Merged projects, in the order they should be listed
        title: Page heading (defaults to settings)

    Returns:
        The HTML document
    """
    title = html.escape(title or settings.landing_page_title)
    if projects:
        cards = "\n".join(
            CARD_TEMPLATE.format(
                href=html.escape(project.base_path, quote=True),
                name=html.escape(project.display_name),
            )
            for project in projects
        )
        body = f'        <div class="projects-grid">\n{cards}\n        </div>'
    else:
        body = '        <p class="empty">No project was built.</p>'
    return PAGE_TEMPLATE.format(title=title, body=body)


def write_landing_page(projects: Sequence[Project], path: Path, title: Optional[str] = None) -> Path:
    """Write the landing page to ``path``.

    Raises:
        ConfigWriteError: The file could not be written
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_landing_page(projects, title), encoding="utf-8")
    except OSError as e:
        raise ConfigWriteError(path, str(e)) from e
    return path
