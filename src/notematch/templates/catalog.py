from __future__ import annotations

import logging
import threading
from types import MappingProxyType
from typing import Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from ..config import TemplateParams
from ..errors import UnknownShape
from .shape import Shape
from .template import Template

logger = logging.getLogger(__name__)


class TemplateCatalog:
    """
    Read-only set of templates, one per shape, all built for one interline.
    """

    def __init__(self, interline: int, templates: Mapping[Shape, Template]) -> None:
        for shape, template in templates.items():
            if template.shape is not shape or template.interline != interline:
                raise ValueError(
                    f"template {template.shape.name}@{template.interline} "
                    f"filed under {shape.name}@{interline}"
                )
        self._interline = interline
        self._templates = MappingProxyType(dict(templates))

    @classmethod
    def build(
        cls,
        interline: int,
        shapes: Iterable[Shape] = tuple(Shape),
        params: TemplateParams | None = None,
    ) -> "TemplateCatalog":
        templates = {shape: Template.build(shape, interline, params) for shape in shapes}
        return cls(interline, templates)

    @property
    def interline(self) -> int:
        return self._interline

    @property
    def shapes(self) -> Tuple[Shape, ...]:
        return tuple(self._templates)

    def lookup(self, shape: Shape) -> Template:
        try:
            return self._templates[shape]
        except (KeyError, TypeError):
            raise UnknownShape(f"no template for {shape!r} at interline {self._interline}") from None

    def __contains__(self, shape: object) -> bool:
        try:
            return shape in self._templates
        except TypeError:
            return False

    def __iter__(self) -> Iterator[Template]:
        return iter(self._templates.values())

    def __len__(self) -> int:
        return len(self._templates)

    def __repr__(self) -> str:
        names = ", ".join(shape.name for shape in self._templates)
        return f"TemplateCatalog(interline={self._interline}, shapes=[{names}])"


CatalogBuilder = Callable[[int, Tuple[Shape, ...], Optional[TemplateParams]], TemplateCatalog]


class TemplateFactory:
    """
    Cache of template catalogs keyed by interline.

    Each catalog is built at most once. Concurrent first requests for the
    same interline wait for the single build; other interlines build in
    parallel.
    """

    def __init__(
        self,
        shapes: Iterable[Shape] = tuple(Shape),
        params: TemplateParams | None = None,
        builder: CatalogBuilder | None = None,
    ) -> None:
        self.shapes = tuple(shapes)
        if not self.shapes:
            raise ValueError("shapes must contain at least one shape")
        self.params = params or TemplateParams()
        self._builder = builder or TemplateCatalog.build
        self._catalogs: Dict[int, TemplateCatalog] = {}
        self._locks: Dict[int, threading.Lock] = {}
        self._guard = threading.Lock()

    def get_catalog(self, interline: int) -> TemplateCatalog:
        catalog = self._catalogs.get(interline)
        if catalog is not None:
            return catalog

        with self._guard:
            lock = self._locks.setdefault(interline, threading.Lock())

        with lock:
            catalog = self._catalogs.get(interline)
            if catalog is None:
                logger.info("Building template catalog for interline %d", interline)
                catalog = self._builder(interline, self.shapes, self.params)
                with self._guard:
                    self._catalogs[interline] = catalog
        return catalog

    def get_template(self, shape: Shape, interline: int) -> Template:
        return self.get_catalog(interline).lookup(shape)

    @property
    def interlines(self) -> List[int]:
        with self._guard:
            return sorted(self._catalogs)

    def clear(self) -> None:
        """
        Forget every cached catalog. Catalogs already handed out stay valid.

        A build in progress is waited for and then dropped, so no catalog
        started before the call survives it. Per-interline locks are kept.
        """
        with self._guard:
            locks = list(self._locks.items())
        for interline, lock in locks:
            with lock:
                with self._guard:
                    self._catalogs.pop(interline, None)
