"""Landing module: root index page and project list."""

from .landing_page import render_landing_page, write_landing_page
from .project_list import build_project_list, write_project_list

__all__ = [
    "render_landing_page",
    "write_landing_page",
    "build_project_list",
    "write_project_list",
]
