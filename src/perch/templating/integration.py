"""Kida environment setup and page binding.

Creates a kida Environment from perch's PerchConfig and binds
user-registered filters and globals. The environment is created
once per PageEngine and shared by every page evaluated through it.
"""

from collections.abc import Callable, Mapping
from typing import Any

from kida import ChoiceLoader, Environment, FileSystemLoader

from perch.config import PerchConfig


def create_environment(
    config: PerchConfig,
    filters: dict[str, Callable[..., Any]] | None = None,
    globals_: dict[str, Any] | None = None,
) -> Environment:
    """Create a kida Environment from engine configuration.

    Supports multiple template directories via ``config.component_dirs``
    for partials and shared layout markup.
    """
    loaders = [
        FileSystemLoader(str(config.template_dir)),
    ]
    loaders.extend(FileSystemLoader(str(d)) for d in config.component_dirs)

    env = Environment(
        loader=ChoiceLoader(loaders),
        autoescape=config.autoescape,
        auto_reload=config.debug,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
    )

    if filters:
        env.update_filters(filters)

    for name, value in (globals_ or {}).items():
        env.add_global(name, value)

    return env


def render_source(env: Environment, source: str, context: Mapping[str, Any]) -> str:
    """Render an inline template string against *context*."""
    template = env.from_string(source)
    return template.render(dict(context))
