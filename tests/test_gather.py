from __future__ import annotations

import pytest

from stacksite.errors import MetadataError
from stacksite.gather import gather_declarations, gather_sources


def test_declarations_are_scoped_to_their_directory(site_builder) -> None:
    site_builder.write({"blog/meta.json": '{"section": "blog", "nav": {"home": "/"}}'})
    site = site_builder.site()

    gather_declarations(site)

    source = site_builder.source
    assert site.stack.get(source / "blog" / "post.md") == {"section": "blog", "nav": {"home": "/"}}
    assert site.stack.get(source / "about.html") == {}
    assert source / "blog" in site.stack


def test_last_declaration_in_a_directory_wins(site_builder) -> None:
    site_builder.write({"blog/a.json": '{"owner": "a", "only_a": 1}', "blog/b.json": '{"owner": "b"}'})
    site = site_builder.site()

    gather_declarations(site)

    assert site.stack.get(site_builder.source / "blog" / "x.md") == {"owner": "b"}


def test_invalid_declaration_aborts(site_builder) -> None:
    site_builder.write({"site.json": '{"title": "broken",}'})

    with pytest.raises(MetadataError, match="site.json"):
        gather_declarations(site_builder.site())


def test_plain_page_receives_default_metadata(site_builder) -> None:
    site_builder.write({"about.html": "<p>About</p>\n"})
    site = site_builder.site()

    gather_declarations(site)
    gather_sources(site)

    metadata = site.stack.get(site_builder.source / "about.html")
    assert metadata == {
        "source": str(site_builder.source / "about.html"),
        "target": str(site_builder.target / "about.html"),
        "url": "/about.html",
        "sortkey": "about.html",
    }


def test_markdown_target_uses_html_extension(site_builder) -> None:
    site_builder.write({"docs/guide.md": "# Guide\n"})
    site = site_builder.site()

    gather_sources(site)

    metadata = site.index["docs"]["guide.md"]
    assert metadata["url"] == "/docs/guide.html"
    assert "redirects" not in metadata


def test_front_matter_beats_inherited_beats_defaults(site_builder) -> None:
    site_builder.write(
        {
            "site.json": '{"title": "Site", "author": "root", "nav": {"home": "/", "about": "/about"}}',
            "blog/blog.json": '{"author": "blog"}',
            "blog/2024-03-01-hello-world.md": """
                {"author": "post", "nav": {"about": "/me"}}
                ---
                Hello
            """,
        }
    )
    site = site_builder.site()

    gather_declarations(site)
    gather_sources(site)

    metadata = site.stack.get(site_builder.source / "blog" / "2024-03-01-hello-world.md")
    assert metadata["author"] == "post"
    assert metadata["nav"] == {"home": "/", "about": "/me"}
    # A cascaded title outranks the one derived from the file name.
    assert metadata["title"] == "Site"
    assert metadata["date"] == "2024-03-01"
    assert metadata["url"] == "/blog/2024/03/01/hello-world.html"
    assert metadata["redirects"] == ["/blog/2024-03-01-hello-world.html", "/blog/hello-world.html"]


def test_blog_defaults_can_be_overridden_by_front_matter(site_builder) -> None:
    site_builder.write(
        {"2024-03-01-hello-world.md": '{"title": "Custom", "sortkey": "0001"}\n---\nHello\n'}
    )
    site = site_builder.site()

    gather_sources(site)

    metadata = site.index["2024-03-01-hello-world.md"]
    assert metadata["title"] == "Custom"
    assert metadata["sortkey"] == "0001"
    assert metadata["url"] == "/2024/03/01/hello-world.html"


def test_site_index_lists_each_publishable_file_once(site_builder) -> None:
    site_builder.write(
        {
            "index.html": "home",
            "blog/one.md": "one",
            "blog/deep/two.html": "two",
            "css/site.css": "body {}",
            "blog/blog.json": "{}",
        }
    )
    site = site_builder.site()

    gather_declarations(site)
    gather_sources(site)

    assert set(site.index) == {"index.html", "blog"}
    assert set(site.index["blog"]) == {"one.md", "deep"}
    assert site.index["blog"]["deep"]["two.html"]["url"] == "/blog/deep/two.html"
    assert site.index["blog"]["one.md"] == site.stack.get(site_builder.source / "blog" / "one.md")
