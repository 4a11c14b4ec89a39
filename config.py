"""Configuration settings for Bundle Forge."""

from dotenv import load_dotenv
from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List, Optional
from pathlib import Path

# Load .env into os.environ so variables read by child build commands resolve too
load_dotenv()


class Settings(BaseSettings):
    """Global settings for Bundle Forge.

    Settings can be overridden via environment variables with BUNDLE_FORGE_ prefix.
    Example: BUNDLE_FORGE_OUTPUT_DIR=public_html
    """

    # Paths
    workspace_root: str = Field(
        default=".",
        description="Directory whose immediate children are scanned for sub-projects"
    )
    output_dir: str = Field(
        default="dist",
        description="Shared output tree, relative to the workspace root"
    )
    build_output_dir: str = Field(
        default="dist",
        description="Build output directory inside each sub-project"
    )
    dependency_cache_dir: str = Field(
        default="node_modules",
        description="Directory whose presence means dependencies are already installed"
    )
    public_mirror_dir: Optional[str] = Field(
        default=None,
        description="Optional copy of the output tree for hosts that look for public/"
    )

    # Project detection
    manifest_filename: str = Field(
        default="package.json",
        description="Dependency manifest every sub-project must contain"
    )
    config_filenames: List[str] = Field(
        default=["vite.config.js", "vite.config.ts", "vite.config.mjs", "vite.config.mts"],
        description="Build-tool configuration files, first match wins"
    )
    ignored_dirs: List[str] = Field(
        default=["node_modules", "dist", "public", "src", "scripts", "static", "assets"],
        description="Workspace children never treated as sub-projects"
    )

    # External build step
    install_command: str = Field(
        default="npm install",
        description="Dependency installation command run inside each project"
    )
    build_command: str = Field(
        default="npm run build",
        description="Build command run inside each project"
    )
    skip_install: bool = Field(
        default=False,
        description="Never run the install command, even without a dependency cache"
    )
    max_workers: int = Field(
        default=1,
        ge=1,
        description="Projects built concurrently; 1 keeps the pipeline sequential"
    )
    clean_output: bool = Field(
        default=True,
        description="Remove the shared output tree before building"
    )

    # Asset rewriting
    asset_folders: List[str] = Field(
        default=[
            "textures", "models", "images", "img", "sounds", "audio",
            "fonts", "media", "static", "draco", "environmentMaps",
        ],
        description="Root-level asset folders whose literals get the base path prefix"
    )
    script_extensions: List[str] = Field(
        default=[".js", ".mjs", ".cjs"],
        description="Compiled script files scanned by the rewriter"
    )

    # Routing
    static_extensions: List[str] = Field(
        default=[
            "js", "mjs", "cjs", "css", "map", "json", "wasm",
            "png", "jpg", "jpeg", "gif", "webp", "avif", "svg", "ico", "bmp",
            "ktx2", "basis", "hdr", "exr", "glb", "gltf", "bin", "obj", "fbx", "drc",
            "woff", "woff2", "ttf", "otf", "eot",
            "mp3", "wav", "ogg", "mp4", "webm",
            "txt", "xml", "csv",
        ],
        description="Extensions always served as literal files"
    )
    cache_control: str = Field(
        default="public, max-age=31536000, immutable",
        description="Cache-Control header attached to static-asset routes"
    )
    route_config_file: str = Field(
        default="vercel.json",
        description="Routing descriptor written at the workspace root"
    )
    route_config_version: int = Field(
        default=2,
        description="Schema version of the routing descriptor"
    )

    # Landing page
    projects_list_file: str = Field(
        default="projects.json",
        description="Project list consumed by the landing page"
    )
    landing_page_title: str = Field(
        default="Projects",
        description="Title of the generated landing page"
    )

    log_level: str = Field(
        default="INFO",
        description="Root logging level"
    )

    model_config = {
        "env_prefix": "BUNDLE_FORGE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    def get_workspace_path(self) -> Path:
        """Get workspace root as Path object."""
        return Path(self.workspace_root)

    def get_output_path(self) -> Path:
        """Get the shared output tree, resolved against the workspace root."""
        return self.get_workspace_path() / self.output_dir

    def get_route_config_path(self, root: Optional[Path] = None) -> Path:
        """Get the routing descriptor path, beside the given or configured workspace root."""
        return Path(root or self.get_workspace_path()) / self.route_config_file


# Create singleton instance
settings = Settings()
