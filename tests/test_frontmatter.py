import pytest
import yaml

from obsidian_publish import frontmatter


def test_parse_without_block():
    assert frontmatter.parse("just text\n") == ({}, "just text\n")


def test_parse_with_block():
    meta, body = frontmatter.parse("---\ntitle: Hello\ntags: [a, b]\n---\nBody\n")
    assert meta == {"title": "Hello", "tags": ["a", "b"]}
    assert body == "Body\n"


def test_parse_empty_block():
    assert frontmatter.parse("---\n---\nbody") == ({}, "body")


@pytest.mark.parametrize("text", [
    "---\n- a\n- b\n---\nbody",
    "---\ntitle: [unclosed\n---\nbody",
])
def test_parse_rejects_bad_blocks(text):
    with pytest.raises(ValueError):
        frontmatter.parse(text)


def test_serialize_keeps_order_and_unicode():
    out = frontmatter.serialize({"title": "日本", "draft": False, "a": 1}, "body")
    assert out == "---\ntitle: 日本\ndraft: false\na: 1\n---\nbody\n"


def test_serialize_quoted_strings():
    out = frontmatter.serialize({"title": "T", "published": True, "topics": ["x"]}, "b\n",
                                quote_strings=True)
    fm, body = frontmatter.split_frontmatter_and_body(out)
    assert '"T"' in fm
    assert '"x"' in fm
    assert "true" in fm
    assert yaml.safe_load(fm) == {"title": "T", "published": True, "topics": ["x"]}
    assert body == "b\n"


def test_serialize_quoted_strings_leaves_keys_plain():
    out = frontmatter.serialize({"title": "T", "published": True}, "b\n", quote_strings=True)
    assert out == '---\ntitle: "T"\npublished: true\n---\nb\n'


def test_serialize_roundtrips_through_parse():
    meta = {"title": "x", "tags": ["a"]}
    assert frontmatter.parse(frontmatter.serialize(meta, "body\n")) == (meta, "body\n")
