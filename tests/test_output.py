"""Tests for perch.output — LayoutWriter and its silent mode."""

import pytest

from perch.output import LayoutWriter


class TestLayoutWriter:
    def test_collects_writes(self) -> None:
        out = LayoutWriter()
        out.write("<p>")
        out.write("hi")
        out.write("</p>")
        assert out.getvalue() == "<p>hi</p>"

    def test_silent_drops_writes(self) -> None:
        out = LayoutWriter(silent=True)
        out.write("dropped")
        out.set_silent(False)
        out.write("kept")

        assert out.is_silent is False
        assert out.getvalue() == "kept"

    def test_silenced_restores_previous_flag(self) -> None:
        out = LayoutWriter()
        with out.silenced():
            assert out.is_silent is True
            out.write("dropped")
            with out.silenced(False):
                out.write("kept")
            assert out.is_silent is True
        assert out.is_silent is False
        assert out.getvalue() == "kept"

    def test_silenced_restores_on_error(self) -> None:
        out = LayoutWriter(silent=True)
        with pytest.raises(RuntimeError), out.silenced(False):
            raise RuntimeError
        assert out.is_silent is True

    def test_repr(self) -> None:
        assert "silent" in repr(LayoutWriter(silent=True))
        assert "audible" in repr(LayoutWriter())
