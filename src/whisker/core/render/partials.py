"""Partial registry: the name -> Template namespace used by ``{{>name}}`` and ``{{<name}}``.

The registry is read-only once built. Partials are parsed independently,
each starting from the registry's parse options, so a delimiter change in one
template never leaks into another.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterator, Mapping, Optional, Union

from ..exceptions import TemplateNotFoundError
from ..template.template import Template, TemplateOptions

logger = logging.getLogger(__name__)

PartialSource = Union[str, Template]

DEFAULT_SUFFIX = ".mustache"


class PartialRegistry(Mapping[str, Template]):
    """Immutable mapping of partial names to parsed templates.

    Usage:
        partials = PartialRegistry.from_mapping({"user": "<b>{{name}}</b>"})
        render(template, data, partials)
    """

    def __init__(self, templates: Optional[Mapping[str, Template]] = None) -> None:
        self._templates: Dict[str, Template] = dict(templates or {})

    @classmethod
    def from_mapping(
        cls,
        sources: Mapping[str, PartialSource],
        options: Optional[TemplateOptions] = None,
    ) -> "PartialRegistry":
        """Build a registry from template text and/or parsed templates.

        Raises:
            TemplateSyntaxError: If any text source fails to parse
        """
        templates: Dict[str, Template] = {}
        for name, source in sources.items():
            if isinstance(source, Template):
                templates[name] = source
            else:
                templates[name] = Template.from_text(source, options, name=name)
        return cls(templates)

    @classmethod
    def from_directory(
        cls,
        directory: Union[str, Path],
        *,
        suffix: str = DEFAULT_SUFFIX,
        options: Optional[TemplateOptions] = None,
        encoding: str = "utf-8",
    ) -> "PartialRegistry":
        """Parse every ``*<suffix>`` file below ``directory``.

        Names are the POSIX relative path without the suffix, so
        ``layouts/base.mustache`` is available as ``{{>layouts/base}}``.

        Raises:
            TemplateNotFoundError: If ``directory`` does not exist
            TemplateSyntaxError: If any file fails to parse
        """
        root = Path(directory)
        if not root.is_dir():
            raise TemplateNotFoundError(
                f"Partials directory not found: {root}", context={"path": str(root)}
            )

        templates: Dict[str, Template] = {}
        for path in sorted(root.rglob(f"*{suffix}")):
            if not path.is_file():
                continue
            name = path.relative_to(root).as_posix()[: -len(suffix)]
            text = path.read_text(encoding=encoding)
            templates[name] = Template.from_text(text, options, name=name)
        logger.debug("Loaded %d partials from %s", len(templates), root)
        return cls(templates)

    def __getitem__(self, name: str) -> Template:
        return self._templates[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._templates)

    def __len__(self) -> int:
        return len(self._templates)

    def __repr__(self) -> str:
        return f"PartialRegistry({sorted(self._templates)!r})"


def as_registry(
    partials: Optional[Mapping[str, PartialSource]],
    options: Optional[TemplateOptions] = None,
) -> Mapping[str, Template]:
    """Normalize the ``partials`` argument accepted by the render functions."""
    if partials is None:
        return PartialRegistry()
    if isinstance(partials, PartialRegistry):
        return partials
    if all(isinstance(value, Template) for value in partials.values()):
        return partials  # type: ignore[return-value]
    return PartialRegistry.from_mapping(partials, options)


__all__ = ["PartialRegistry", "DEFAULT_SUFFIX", "as_registry"]
