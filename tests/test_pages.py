"""Tests for perch.pages — registration, evaluation, the tag protocol, pooling."""

import pytest
from kida import DictLoader, Environment

from perch.errors import ConfigurationError, PageNotFoundError
from perch.pages import EndAction, PageContext, PageEngine, Scope, StartAction, TagPool


def _engine(templates: dict[str, str] | None = None) -> PageEngine:
    return PageEngine(env=Environment(loader=DictLoader(templates or {})))


class RecordingTag:
    """Tag that records every protocol call it receives."""

    def __init__(self) -> None:
        self.parent = None
        self.start = StartAction.EVAL_BODY_INCLUDE
        self.end = EndAction.EVAL_PAGE
        self.calls: list[str] = []

    def do_start_tag(self, page: PageContext) -> StartAction:
        self.calls.append("start")
        return self.start

    def do_end_tag(self, page: PageContext) -> EndAction:
        self.calls.append("end")
        return self.end

    def do_finally(self, page: PageContext) -> None:
        self.calls.append("finally")

    def release(self) -> None:
        self.calls.append("release")


class TestRegistration:
    def test_decorator_registers_page(self) -> None:
        engine = _engine()

        @engine.page("/index.page")
        def index(page):
            page.write("hi")

        assert "/index.page" in engine
        assert engine.get_page("/index.page").body is index

    def test_duplicate_path(self) -> None:
        engine = _engine()
        engine.register("/index.page", lambda p: None)

        with pytest.raises(ConfigurationError, match="already registered"):
            engine.register("/index.page", lambda p: None)

    def test_unknown_page(self) -> None:
        with pytest.raises(PageNotFoundError, match="/nope.page"):
            _engine().render("/nope.page")


class TestRender:
    def test_writes_and_templates(self) -> None:
        engine = _engine({"greeting.html": "<p>Hello, {{ name }}!</p>"})

        @engine.page("/index.page")
        def index(page):
            page.write("<div>")
            page.include_template("greeting.html")
            page.write_template("<span>{{ extra }}</span>", extra="x")
            page.write("</div>")

        assert engine.render("/index.page", name="World") == (
            "<div><p>Hello, World!</p><span>x</span></div>"
        )

    def test_include_shares_request_and_output(self) -> None:
        engine = _engine()

        @engine.page("/partial.page")
        def partial(page):
            page.write(page.find_attribute("who"))
            page.set_attribute("seen", True, Scope.REQUEST)
            page.set_attribute("local", True)

        @engine.page("/index.page")
        def index(page):
            page.set_attribute("who", "request", Scope.REQUEST)
            page.include("/partial.page")
            page.write(f":{page.find_attribute('seen')}:{page.find_attribute('local')}")

        assert engine.render("/index.page") == "request:True:None"

    def test_page_scope_shadows_request_scope(self) -> None:
        engine = _engine()

        @engine.page("/index.page")
        def index(page):
            page.set_attribute("title", "page")
            page.write_template("{{ title }}")
            page.remove_attribute("title")
            page.write_template("/{{ title }}")

        assert engine.render("/index.page", title="request") == "page/request"

    def test_request_scope_is_per_render(self) -> None:
        engine = _engine()

        @engine.page("/index.page")
        def index(page):
            page.write(str(page.find_attribute("count", 0)))
            page.set_attribute("count", 1, Scope.REQUEST)

        assert engine.render("/index.page") == "0"
        assert engine.render("/index.page") == "0"


class TestInvoke:
    def test_protocol_order(self) -> None:
        engine = _engine()
        tag = RecordingTag()

        @engine.page("/index.page")
        def index(page):
            page.invoke(tag, lambda p: tag.calls.append("body"))

        engine.render("/index.page")
        assert tag.calls == ["start", "body", "end", "finally"]

    def test_skip_body(self) -> None:
        engine = _engine()
        tag = RecordingTag()
        tag.start = StartAction.SKIP_BODY

        @engine.page("/index.page")
        def index(page):
            page.invoke(tag, lambda p: tag.calls.append("body"))

        engine.render("/index.page")
        assert tag.calls == ["start", "end", "finally"]

    def test_skip_page_stops_only_the_current_page(self) -> None:
        engine = _engine()
        tag = RecordingTag()
        tag.end = EndAction.SKIP_PAGE

        @engine.page("/partial.page")
        def partial(page):
            page.write("a")
            page.invoke(tag)
            page.write("b")

        @engine.page("/index.page")
        def index(page):
            page.include("/partial.page")
            page.write("c")

        assert engine.render("/index.page") == "ac"

    def test_finally_runs_when_body_raises(self) -> None:
        engine = _engine()
        tag = RecordingTag()

        def body(page: PageContext) -> None:
            msg = "boom"
            raise ValueError(msg)

        @engine.page("/index.page")
        def index(page):
            page.invoke(tag, body)

        with pytest.raises(ValueError, match="boom"):
            engine.render("/index.page")
        assert tag.calls == ["start", "finally"]

    def test_parent_and_current_tag(self) -> None:
        engine = _engine()
        outer, inner = RecordingTag(), RecordingTag()
        seen: list[object] = []

        @engine.page("/index.page")
        def index(page):
            seen.append(page.current_tag)
            page.invoke(outer, lambda p: p.invoke(inner, lambda q: seen.append(q.current_tag)))
            seen.append(page.current_tag)

        engine.render("/index.page")
        assert seen == [None, inner, None]
        assert inner.parent is outer
        assert outer.parent is None

    def test_find_ancestor_tag(self) -> None:
        engine = _engine()
        page = PageContext(engine, engine.register("/x.page", lambda p: None), None, None)  # type: ignore[arg-type]
        outer, middle, inner = RecordingTag(), RecordingTag(), RecordingTag()
        middle.parent = outer
        inner.parent = middle

        assert page.find_ancestor_tag(inner, RecordingTag) is middle
        assert page.find_ancestor_tag(outer, RecordingTag) is None


class PooledTag(RecordingTag):
    def __init__(self) -> None:
        super().__init__()
        self.label = ""

    def release(self) -> None:
        super().release()
        self.label = ""


class TestTagPool:
    def test_acquire_sets_attributes(self) -> None:
        pool = TagPool()
        tag = pool.acquire(PooledTag, label="a")
        assert tag.label == "a"

    def test_release_resets_and_reuses(self) -> None:
        pool = TagPool()
        tag = pool.acquire(PooledTag, label="a")
        pool.release(tag)

        assert tag.label == ""
        assert pool.idle(PooledTag) == 1
        assert pool.acquire(PooledTag) is tag
        assert pool.idle(PooledTag) == 0

    def test_disabled_pool_always_creates(self) -> None:
        pool = TagPool(enabled=False)
        tag = pool.acquire(PooledTag)
        pool.release(tag)

        assert pool.idle(PooledTag) == 0
        assert pool.acquire(PooledTag) is not tag

    def test_invoke_with_class_uses_pool(self) -> None:
        engine = _engine()
        labels: list[str] = []

        @engine.page("/index.page")
        def index(page):
            page.invoke(PooledTag, lambda p: labels.append(p.current_tag.label), label="x")

        engine.render("/index.page")
        engine.render("/index.page")

        assert labels == ["x", "x"]
        assert engine.pool.idle(PooledTag) == 1
