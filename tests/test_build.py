from __future__ import annotations

import pytest

from stacksite.errors import MetadataError, RenderError, StackFrozenError

SITE = {
    "site.json": '{"site_name": "Demo"}',
    "page.template": "<title>{{ title }} - {{ site_name }}</title><body>{{ content }}</body>\n",
    "index.html": """
        <ul>{% for page in sorted(files.blog) %}<li><a href="{{ relative(page.url) }}">{{ page.title }}</a></li>{% endfor %}</ul>
    """,
    "blog/blog.json": '{"template": "/page.template"}',
    "blog/2024-03-01-hello-world.md": "Hello **world**\n",
    "blog/2024-02-01-first-post.md": """
        {"title": "First", "toc": true}
        ---
        # Intro

        text
    """,
    "css/site.css": "body { margin: 0; }\n",
    "notes.source": "draft notes",
    ".hidden/secret.txt": "secret",
}


def test_build_renders_copies_and_skips(site_builder) -> None:
    site_builder.write(SITE)

    site = site_builder.build()

    target = site_builder.target
    assert site_builder.output("index.html") == (
        '<ul><li><a href="blog/2024/02/01/first-post.html">First</a></li>'
        '<li><a href="blog/2024/03/01/hello-world.html">Hello World</a></li></ul>\n'
    )
    assert site_builder.output("blog/2024/03/01/hello-world.html") == (
        "<title>Hello World - Demo</title><body><p>Hello <strong>world</strong></p></body>\n"
    )
    assert site_builder.output("css/site.css") == "body { margin: 0; }\n"
    assert not (target / "site.json").exists()
    assert not (target / "blog" / "blog.json").exists()
    assert not (target / "page.template").exists()
    assert not (target / "notes.source").exists()
    assert not (target / ".hidden").exists()
    assert len(site.report.rendered) == 3
    assert len(site.report.copied) == 1


def test_toc_flag_controls_table_of_contents(site_builder) -> None:
    site_builder.write(SITE)

    site_builder.build()

    assert '<div class="toc">' in site_builder.output("blog/2024/02/01/first-post.html")
    assert 'class="toc"' not in site_builder.output("blog/2024/03/01/hello-world.html")


def test_blog_post_writes_one_stub_per_redirect(site_builder) -> None:
    site_builder.write({"blog/2024-03-01-hello-world.md": "Hello\n"})

    site = site_builder.build()

    target = site_builder.target
    assert sorted(site.report.redirects) == sorted(
        [target / "blog" / "2024-03-01-hello-world.html", target / "blog" / "hello-world.html"]
    )
    for stub in site.report.redirects:
        assert "url=/blog/2024/03/01/hello-world.html" in stub.read_text(encoding="utf-8")
    written = sorted(path.relative_to(target).as_posix() for path in target.rglob("*") if path.is_file())
    assert written == [
        "blog/2024-03-01-hello-world.html",
        "blog/2024/03/01/hello-world.html",
        "blog/hello-world.html",
    ]


def test_html_without_metadata_renders_with_defaults(site_builder) -> None:
    site_builder.write({"about/index.html": "{{ url }} {{ sortkey }}\n"})

    site_builder.build()

    assert site_builder.output("about/index.html") == "/about/index.html index.html\n"


def test_html_front_matter_is_stripped_and_applied(site_builder) -> None:
    site_builder.write({"site.json": '{"title": "Site"}', "page.html": '{"title": "Page"}\n---\n<h1>{{ title }}</h1>\n'})

    site_builder.build()

    assert site_builder.output("page.html") == "<h1>Page</h1>\n"


def test_page_can_shadow_site_index_key(site_builder) -> None:
    site_builder.write({"a.html": '{"files": "mine"}\n---\n{{ files }}', "b.html": "{{ files['a.html'].url }}"})

    site_builder.build()

    assert site_builder.output("a.html") == "mine"
    assert site_builder.output("b.html") == "/a.html"


def test_global_key_is_configurable(site_builder) -> None:
    site_builder.write({"index.html": "{{ pages['index.html'].sortkey }}"})

    site_builder.build(global_key="pages")

    assert site_builder.output("index.html") == "index.html"


def test_stack_is_read_only_after_build(site_builder) -> None:
    site_builder.write({"index.html": "home"})

    site = site_builder.build()

    assert site.stack.frozen
    with pytest.raises(StackFrozenError):
        site.stack.add(site_builder.source, {"late": True})


def test_builds_are_independent(site_builder) -> None:
    site_builder.write(SITE)

    first = site_builder.build()
    second = site_builder.build()

    assert first.stack is not second.stack
    assert first.index == second.index
    assert len(second.report.rendered) == 3


def test_target_inside_source_is_not_walked(site_builder) -> None:
    site_builder.write({"a.txt": "a"})
    target = site_builder.source / "out"

    site_builder.build(target=target)
    site_builder.build(target=target)

    assert (target / "a.txt").read_text(encoding="utf-8") == "a"
    assert not (target / "out").exists()


def test_template_failure_aborts_build(site_builder) -> None:
    site_builder.write({"bad.html": "{% for %}"})

    with pytest.raises(RenderError, match="bad.html"):
        site_builder.build()


def test_invalid_front_matter_aborts_build(site_builder) -> None:
    site_builder.write({"bad.md": '{"title": \n---\nbody'})

    with pytest.raises(MetadataError):
        site_builder.build()


def test_redirects_must_stay_inside_target(site_builder) -> None:
    site_builder.write({"escape.md": '{"redirects": ["/../outside.html"]}\n---\nbody'})

    with pytest.raises(MetadataError, match="redirect"):
        site_builder.build()


def test_target_must_stay_inside_target_root(site_builder, tmp_path) -> None:
    outside = tmp_path / "elsewhere" / "page.html"
    site_builder.write({"page.html": '{"target": "%s"}\n---\n<p>hi</p>\n' % outside.as_posix()})

    with pytest.raises(MetadataError, match="target"):
        site_builder.build()
    assert not outside.exists()


def test_relative_target_override_is_under_target_root(site_builder) -> None:
    site_builder.write({"page.html": '{"target": "moved/page.html"}\n---\n<p>hi</p>\n'})

    site_builder.build()

    assert site_builder.output("moved/page.html") == "<p>hi</p>\n"


def test_markdown_opening_with_rules_builds(site_builder) -> None:
    site_builder.write({"post.md": "---\nJust a paragraph between rules.\n---\n\nMore text\n"})

    site_builder.build()

    output = site_builder.output("post.html")
    assert "Just a paragraph between rules." in output
    assert "---" not in output
    assert "<p>More text</p>" in output
