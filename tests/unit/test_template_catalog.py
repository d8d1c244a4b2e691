from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from notematch import Shape, Template, TemplateCatalog, TemplateFactory, UnknownShape


def test_get_catalog_is_memoized(factory: TemplateFactory) -> None:
    first = factory.get_catalog(14)
    second = factory.get_catalog(14)

    assert first is second
    assert first.lookup(Shape.NOTEHEAD_BLACK) is second.lookup(Shape.NOTEHEAD_BLACK)
    assert factory.interlines == [14]


def test_catalogs_are_kept_per_interline(factory: TemplateFactory) -> None:
    small = factory.get_catalog(14)
    large = factory.get_catalog(20)

    assert small is not large
    assert small.interline == 14
    assert large.interline == 20
    assert large.lookup(Shape.NOTEHEAD_BLACK).width > small.lookup(Shape.NOTEHEAD_BLACK).width
    assert factory.interlines == [14, 20]


def test_factories_are_isolated() -> None:
    first = TemplateFactory().get_catalog(14)
    second = TemplateFactory().get_catalog(14)

    assert first is not second
    assert first.lookup(Shape.NOTEHEAD_VOID) == second.lookup(Shape.NOTEHEAD_VOID)


def test_catalog_holds_every_shape_by_default(factory: TemplateFactory) -> None:
    catalog = factory.get_catalog(14)

    assert len(catalog) == len(Shape)
    assert set(catalog.shapes) == set(Shape)
    for template in catalog:
        assert template.interline == 14
        assert template.shape in catalog


def test_lookup_of_missing_shape_raises_unknown_shape() -> None:
    catalog = TemplateFactory(shapes=[Shape.NOTEHEAD_BLACK]).get_catalog(14)

    assert Shape.NOTEHEAD_VOID not in catalog
    with pytest.raises(UnknownShape):
        catalog.lookup(Shape.NOTEHEAD_VOID)
    with pytest.raises(KeyError):
        catalog.lookup("notehead_black")  # type: ignore[arg-type]


def test_concurrent_first_requests_build_once() -> None:
    calls = []
    calls_lock = threading.Lock()

    def slow_builder(interline, shapes, params):
        with calls_lock:
            calls.append(interline)
        time.sleep(0.05)
        return TemplateCatalog.build(interline, shapes, params)

    factory = TemplateFactory(builder=slow_builder)
    with ThreadPoolExecutor(max_workers=8) as pool:
        catalogs = list(pool.map(lambda _: factory.get_catalog(14), range(16)))

    assert calls == [14]
    assert all(catalog is catalogs[0] for catalog in catalogs)


def test_failed_build_publishes_nothing() -> None:
    attempts = []

    def flaky_builder(interline, shapes, params):
        attempts.append(interline)
        if len(attempts) == 1:
            raise RuntimeError("renderer unavailable")
        return TemplateCatalog.build(interline, shapes, params)

    factory = TemplateFactory(builder=flaky_builder)
    with pytest.raises(RuntimeError):
        factory.get_catalog(14)
    assert factory.interlines == []

    catalog = factory.get_catalog(14)
    assert catalog.interline == 14


def test_failed_build_leaves_other_catalogs_untouched() -> None:
    def builder(interline, shapes, params):
        if interline == 9:
            raise RuntimeError("no templates at this size")
        return TemplateCatalog.build(interline, shapes, params)

    factory = TemplateFactory(builder=builder)
    published = factory.get_catalog(14)
    template = published.lookup(Shape.NOTEHEAD_BLACK)

    with pytest.raises(RuntimeError):
        factory.get_catalog(9)

    assert factory.get_catalog(14) is published
    assert published.lookup(Shape.NOTEHEAD_BLACK) is template


def test_clear_forgets_catalogs(factory: TemplateFactory) -> None:
    before = factory.get_catalog(14)
    factory.clear()

    assert factory.interlines == []
    after = factory.get_catalog(14)
    assert after is not before
    assert after.lookup(Shape.WHOLE_NOTE) == before.lookup(Shape.WHOLE_NOTE)


def test_clear_waits_for_a_build_in_progress() -> None:
    started = threading.Event()
    release = threading.Event()
    calls = []

    def blocking_builder(interline, shapes, params):
        calls.append(interline)
        started.set()
        release.wait(5.0)
        return TemplateCatalog.build(interline, shapes, params)

    factory = TemplateFactory(builder=blocking_builder)
    builder_thread = threading.Thread(target=factory.get_catalog, args=(14,))
    builder_thread.start()
    assert started.wait(5.0)

    clear_thread = threading.Thread(target=factory.clear)
    clear_thread.start()
    time.sleep(0.05)
    assert clear_thread.is_alive()

    release.set()
    builder_thread.join(5.0)
    clear_thread.join(5.0)

    assert not clear_thread.is_alive()
    assert factory.interlines == []
    factory.get_catalog(14)
    assert calls == [14, 14]


def test_get_template_shortcut(factory: TemplateFactory) -> None:
    template = factory.get_template(Shape.WHOLE_NOTE, 14)

    assert template is factory.get_catalog(14).lookup(Shape.WHOLE_NOTE)


def test_catalog_rejects_misfiled_templates() -> None:
    template = Template.build(Shape.NOTEHEAD_BLACK, 14)

    with pytest.raises(ValueError):
        TemplateCatalog(14, {Shape.NOTEHEAD_VOID: template})
    with pytest.raises(ValueError):
        TemplateCatalog(15, {Shape.NOTEHEAD_BLACK: template})


def test_catalog_mapping_is_read_only(factory: TemplateFactory) -> None:
    catalog = factory.get_catalog(14)

    with pytest.raises(TypeError):
        catalog._templates[Shape.NOTEHEAD_BLACK] = None  # type: ignore[index]


def test_small_interline_is_rejected(factory: TemplateFactory) -> None:
    with pytest.raises(ValueError):
        factory.get_catalog(7)
    assert factory.interlines == []


def test_factory_needs_shapes() -> None:
    with pytest.raises(ValueError):
        TemplateFactory(shapes=[])
