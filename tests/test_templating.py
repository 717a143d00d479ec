"""Tests for perch.templating — kida environment construction."""

from perch.config import PerchConfig
from perch.pages import PageEngine
from perch.templating import create_environment, render_source


def _shout(value: str) -> str:
    return value.upper()


class TestCreateEnvironment:
    def test_loads_from_template_dir(self, tmp_path) -> None:
        (tmp_path / "hello.html").write_text("Hello, {{ name }}!")
        env = create_environment(PerchConfig(template_dir=tmp_path))

        assert env.get_template("hello.html").render({"name": "World"}) == "Hello, World!"

    def test_component_dirs_are_searched(self, tmp_path) -> None:
        main = tmp_path / "main"
        shared = tmp_path / "shared"
        main.mkdir()
        shared.mkdir()
        (shared / "footer.html").write_text("<footer></footer>")
        env = create_environment(PerchConfig(template_dir=main, component_dirs=(shared,)))

        assert env.get_template("footer.html").render({}) == "<footer></footer>"

    def test_filters_and_globals(self, tmp_path) -> None:
        env = create_environment(
            PerchConfig(template_dir=tmp_path),
            filters={"shout": _shout},
            globals_={"site": "perch"},
        )

        assert render_source(env, "{{ site | shout }}", {}) == "PERCH"

    def test_engine_builds_environment_from_config(self, tmp_path) -> None:
        (tmp_path / "title.html").write_text("<title>{{ title }}</title>")
        engine = PageEngine(PerchConfig(template_dir=tmp_path))

        @engine.page("/index.page")
        def index(page):
            page.include_template("title.html")

        assert engine.render("/index.page", title="Home") == "<title>Home</title>"
