"""Engine configuration.

PerchConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class PerchConfig:
    """Page engine configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = PerchConfig(template_dir="views", debug=True)
    """

    # Templates
    template_dir: str | Path = "templates"
    component_dirs: tuple[str | Path, ...] = ()  # Additional template directories (partials, shared markup)
    autoescape: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True

    # Development
    debug: bool = False

    # Tag handlers — reuse instances across evaluations
    pool_tags: bool = True
