"""Tests for implicit index and document type names."""

import pytest

from searchmodel.application.services.naming import (
    default_index_name,
    document_type_for,
    index_name_for,
    pluralize,
    underscore,
)


class DummyTwo:
    pass


class Namespace:
    class DummyTwo:
        pass


@pytest.mark.parametrize(
    "name, expected",
    [
        ("DummyTwo", "dummy_two"),
        ("HTTPRequest", "http_request"),
        ("Article", "article"),
        ("already_snake", "already_snake"),
    ],
)
def test_underscore(name, expected) -> None:
    assert underscore(name) == expected


@pytest.mark.parametrize(
    "word, expected",
    [
        ("dummy_two", "dummy_twos"),
        ("category", "categories"),
        ("key", "keys"),
        ("box", "boxes"),
        ("match", "matches"),
        ("address", "addresses"),
        ("person", "people"),
        ("news", "news"),
        ("blog_entry", "blog_entries"),
        ("", ""),
    ],
)
def test_pluralize(word, expected) -> None:
    assert pluralize(word) == expected


def test_default_index_name_plain_class() -> None:
    assert default_index_name(DummyTwo) == "dummy_twos"


def test_default_index_name_namespaced_class() -> None:
    assert default_index_name(Namespace.DummyTwo) == "namespace-dummy_twos"


def test_default_index_name_drops_locals_marker() -> None:
    class LocalThing:
        pass

    assert default_index_name(LocalThing) == (
        "test_default_index_name_drops_locals_marker-local_things"
    )


class TestIndexNameFor:
    def test_declared_string(self) -> None:
        class Post:
            __index_name__ = "blog_posts"

        assert index_name_for(Post) == "blog_posts"

    def test_declared_callable_evaluated_each_time(self) -> None:
        names = iter(["posts_v1", "posts_v2"])

        class Post:
            __index_name__ = staticmethod(lambda: next(names))

        assert index_name_for(Post) == "posts_v1"
        assert index_name_for(Post) == "posts_v2"

    def test_tablename_fallback(self) -> None:
        class Post:
            __tablename__ = "posts_table"

        assert index_name_for(Post) == "posts_table"

    def test_default_fallback(self) -> None:
        assert index_name_for(DummyTwo) == "dummy_twos"


def test_document_type_for() -> None:
    class Typed:
        __document_type__ = "post"

    assert document_type_for(Typed) == "post"
    assert document_type_for(DummyTwo) is None
