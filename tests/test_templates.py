# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Tests for templates.py and config.py."""

import pytest
from conftest import blank_template

from certrender.config import (
    DEFAULT_FETCH_TIMEOUT,
    get_fetch_timeout,
    get_template_dir,
)
from certrender.exceptions import TemplateLoadError
from certrender.templates import TemplateStore, default_store


class TestTemplateStore:
    """Tests for TemplateStore."""

    def test_loads_from_directory(self, tmp_dir) -> None:
        (tmp_dir / "cp12.pdf").write_bytes(blank_template())
        store = TemplateStore(tmp_dir)

        with store.open("cp12.pdf") as pdf:
            assert len(pdf.pages) == 1
        assert "cp12.pdf" in store

    def test_missing_template(self, store) -> None:
        with pytest.raises(TemplateLoadError, match="not found"):
            store.get("cp12.pdf")

    def test_invalid_pdf(self, store) -> None:
        store.put("broken.pdf", b"%PDF-1.7 nonsense")

        with pytest.raises(TemplateLoadError, match="not a valid PDF"):
            store.open("broken.pdf")

    def test_cached_bytes_survive_file_removal(self, tmp_dir) -> None:
        path = tmp_dir / "cp12.pdf"
        path.write_bytes(blank_template())
        store = TemplateStore(tmp_dir)
        first = store.get("cp12.pdf")

        path.unlink()

        assert store.get("cp12.pdf") is first

    def test_invalidate(self, tmp_dir) -> None:
        store = TemplateStore(tmp_dir)
        store.put("a.pdf", blank_template())
        store.put("b.pdf", blank_template())

        store.invalidate("a.pdf")
        assert "a.pdf" not in store
        assert "b.pdf" in store

        store.invalidate()
        assert "b.pdf" not in store

    def test_each_open_is_a_private_copy(self, store) -> None:
        store.put("cp12.pdf", blank_template())

        with store.open("cp12.pdf") as first, store.open("cp12.pdf") as second:
            first.add_blank_page()
            assert len(second.pages) == 1

    def test_directory_from_environment(self, monkeypatch, tmp_dir) -> None:
        monkeypatch.setenv("CERTRENDER_TEMPLATE_DIR", str(tmp_dir))

        assert TemplateStore().template_dir == tmp_dir
        assert TemplateStore().path_for("x.pdf") == tmp_dir / "x.pdf"

    def test_default_store_is_shared(self) -> None:
        assert default_store() is default_store()


class TestConfig:
    """Tests for config.py."""

    def test_template_dir_default(self, monkeypatch) -> None:
        monkeypatch.delenv("CERTRENDER_TEMPLATE_DIR", raising=False)

        assert get_template_dir().name == "templates"

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("3", 3.0),
            ("0.5", 0.5),
            ("", DEFAULT_FETCH_TIMEOUT),
            ("soon", DEFAULT_FETCH_TIMEOUT),
            ("-1", DEFAULT_FETCH_TIMEOUT),
        ],
    )
    def test_fetch_timeout(self, monkeypatch, raw, expected) -> None:
        monkeypatch.setenv("CERTRENDER_FETCH_TIMEOUT", raw)

        assert get_fetch_timeout() == expected
