from obsidian_publish.links import find_image_embeds, has_link_tokens, rewrite_links


def test_image_embed_with_alt(site, article):
    assert rewrite_links("![[pic.png|My Pic]]", site) == "![My Pic](/pic.png)"
    assert rewrite_links("![[pic.png|My Pic]]", article) == "![My Pic](/images/pic.png)"


def test_bare_image_embed_uses_stem_and_encodes(site, article):
    assert rewrite_links("![[my pic.png]]", site) == "![my pic](/my%20pic.png)"
    assert rewrite_links("![[my pic.png]]", article) == "![my pic](/images/my%20pic.png)"


def test_wikilink_bare(site, article):
    assert rewrite_links("[[Some Page]]", site) == "[Some Page](../some-page/)"
    assert rewrite_links("[[Some Page]]", article) == "[Some Page](Some Page)"


def test_wikilink_alias(site, article):
    assert rewrite_links("[[Some Page|click]]", site) == "[click](../some-page/)"
    assert rewrite_links("[[Some Page|click]]", article) == "[click](Some Page)"


def test_text_outside_tokens_is_untouched(article):
    text = "before [[A]] middle ![[b.png]] after [plain](link)"
    assert rewrite_links(text, article) == (
        "before [A](A) middle ![b](/images/b.png) after [plain](link)"
    )


def test_embed_is_never_rewritten_as_wikilink(site):
    out = rewrite_links("![[diagram.svg]]", site)
    assert out == "![diagram](/diagram.svg)"
    assert "../" not in out


def test_degenerate_tokens_leave_no_syntax(site, article):
    text = "x [[]] y ![[]] z [[a|]]"
    for profile in (site, article):
        out = rewrite_links(text, profile)
        assert not has_link_tokens(out)
        assert "[[" not in out
    assert rewrite_links("[[a|]]", site) == "[a](../a/)"


def test_find_image_embeds_returns_raw_targets():
    text = "![[a.png]] [[b]] ![[c.jpg|x]] ![[My File.PNG]]"
    assert find_image_embeds(text) == ["a.png", "c.jpg", "My File.PNG"]
