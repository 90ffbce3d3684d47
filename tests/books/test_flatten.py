from __future__ import annotations

import pytest

from docsitemap.books.flatten import MalformedTreeError, flatten, flatten_book, strip_extension
from docsitemap.books.models import Book, Chapter, ChapterRecord, FlatPage, LeafTopic, ParentTopic


REPO_PATH = "/docs/en/admin"


def _book(*chapters: Chapter) -> Book:
    return Book(repo_path=REPO_PATH, title="Admin Guide", chapters=chapters, source_dir=REPO_PATH)


def test_leaf_and_nested_group_flatten_in_listed_order() -> None:
    book = _book(
        Chapter(
            dir="get-started",
            name="Get Started",
            topics=(
                LeafTopic(file="intro.adoc", name="Intro"),
                ParentTopic(dir="advanced", topics=(LeafTopic(file="deep-dive.adoc", name="Deep Dive"),)),
            ),
        )
    )

    pages = flatten(book)

    assert pages == (
        FlatPage(chapter=f"{REPO_PATH}/get-started", path=f"{REPO_PATH}/get-started/intro", name="Intro"),
        FlatPage(
            chapter=f"{REPO_PATH}/get-started",
            path=f"{REPO_PATH}/get-started/advanced/deep-dive",
            name="Deep Dive",
        ),
    )


def test_flatten_book_emits_chapter_records_in_order() -> None:
    book = _book(
        Chapter(dir="Chapter One", name="One", topics=(LeafTopic(file="a.adoc", name="A"),)),
        Chapter(dir="chapter_two", name="Two"),
    )

    flattened = flatten_book(book)

    assert flattened.chapters == (
        ChapterRecord(path=f"{REPO_PATH}/chapter-one", name="One"),
        ChapterRecord(path=f"{REPO_PATH}/chapter-two", name="Two"),
    )
    assert [page.path for page in flattened.pages] == [f"{REPO_PATH}/chapter-one/a"]


def test_page_count_matches_leaf_count_in_preorder() -> None:
    book = _book(
        Chapter(
            dir="c1",
            topics=(
                LeafTopic(file="one.adoc"),
                ParentTopic(
                    dir="g1",
                    topics=(
                        LeafTopic(file="two.adoc"),
                        ParentTopic(dir="g2", topics=(LeafTopic(file="three.adoc"),)),
                        LeafTopic(file="four.adoc"),
                    ),
                ),
                LeafTopic(file="five.adoc"),
            ),
        ),
        Chapter(dir="c2", topics=(LeafTopic(file="six.adoc"),)),
    )

    pages = flatten(book)

    assert [page.path.removeprefix(REPO_PATH + "/") for page in pages] == [
        "c1/one",
        "c1/g1/two",
        "c1/g1/g2/three",
        "c1/g1/four",
        "c1/five",
        "c2/six",
    ]


@pytest.mark.parametrize("depth", [1, 5, 12])
def test_deeply_nested_groups_prefix_every_segment(depth: int) -> None:
    node: LeafTopic | ParentTopic = LeafTopic(file="Leaf Page.adoc", name="Leaf")
    for level in reversed(range(depth)):
        node = ParentTopic(dir=f"Level {level}", topics=(node,))

    pages = flatten(_book(Chapter(dir="chapter", topics=(node,))))

    segments = "/".join(f"level-{level}" for level in range(depth))
    assert len(pages) == 1
    assert pages[0].path == f"{REPO_PATH}/chapter/{segments}/leaf-page"


def test_nesting_far_beyond_recursion_limit_is_supported() -> None:
    node: LeafTopic | ParentTopic = LeafTopic(file="bottom.adoc")
    for _ in range(3000):
        node = ParentTopic(dir="x", topics=(node,))

    pages = flatten(_book(Chapter(dir="chapter", topics=(node,))))

    assert len(pages) == 1
    assert pages[0].path.endswith("/x/bottom")
    assert pages[0].path.count("/x") == 3000


def test_parent_topics_without_leaves_contribute_nothing() -> None:
    book = _book(Chapter(dir="chapter", topics=(ParentTopic(dir="empty"), ParentTopic(dir="also-empty"))))

    assert flatten(book) == ()


def test_unknown_node_type_is_fatal_with_location() -> None:
    book = _book(
        Chapter(
            dir="chapter",
            topics=(LeafTopic(file="ok.adoc"), ParentTopic(dir="group", topics=({"name": "raw"},))),  # type: ignore[arg-type]
        )
    )

    with pytest.raises(MalformedTreeError) as excinfo:
        flatten(book)

    assert excinfo.value.book == REPO_PATH
    assert excinfo.value.location == "chapters[0].topics[1].topics[0]"
    assert REPO_PATH in str(excinfo.value)


def test_strip_extension_keeps_names_without_suffix() -> None:
    assert strip_extension("intro.adoc") == "intro"
    assert strip_extension("release.notes.adoc") == "release.notes"
    assert strip_extension("README") == "README"
    assert strip_extension(".hidden") == ".hidden"


def test_dotted_file_names_normalize_to_single_segment() -> None:
    pages = flatten(_book(Chapter(dir="chapter", topics=(LeafTopic(file="release.notes.adoc"),))))

    assert pages[0].path == f"{REPO_PATH}/chapter/release-notes"


@pytest.mark.parametrize(
    ("chapter", "location"),
    [
        (Chapter(dir="", topics=(LeafTopic(file="y.adoc"),)), "chapters[0]"),
        (Chapter(dir="c", topics=(LeafTopic(file="!!!.adoc"),)), "chapters[0].topics[0]"),
        (
            Chapter(dir="c", topics=(ParentTopic(dir="***", topics=(LeafTopic(file="x.adoc"),)),)),
            "chapters[0].topics[0]",
        ),
    ],
)
def test_identifiers_that_normalize_to_nothing_are_fatal(chapter: Chapter, location: str) -> None:
    with pytest.raises(MalformedTreeError, match="empty segment") as excinfo:
        flatten(_book(chapter))

    assert excinfo.value.location == location


def test_leaves_colliding_after_normalization_are_fatal() -> None:
    book = _book(
        Chapter(
            dir="c",
            topics=(
                LeafTopic(file="Intro.adoc"),
                ParentTopic(dir="group", topics=(LeafTopic(file="other.adoc"),)),
                LeafTopic(file="intro.adoc"),
            ),
        )
    )

    with pytest.raises(MalformedTreeError) as excinfo:
        flatten(book)

    assert excinfo.value.location == "chapters[0].topics[2]"
    assert f"{REPO_PATH}/c/intro" in excinfo.value.message
    assert "chapters[0].topics[0]" in excinfo.value.message


def test_same_file_name_in_different_groups_is_allowed() -> None:
    book = _book(
        Chapter(
            dir="c",
            topics=(
                LeafTopic(file="overview.adoc"),
                ParentTopic(dir="group", topics=(LeafTopic(file="overview.adoc"),)),
            ),
        )
    )

    assert [page.path for page in flatten(book)] == [f"{REPO_PATH}/c/overview", f"{REPO_PATH}/c/group/overview"]
