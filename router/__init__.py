"""Router module: routing descriptor synthesis for the static host."""

from .route_synthesizer import (
    RouteConfigSynthesizer,
    escape_path,
    synthesize_routes,
    write_route_config,
)

__all__ = [
    "RouteConfigSynthesizer",
    "escape_path",
    "synthesize_routes",
    "write_route_config",
]
