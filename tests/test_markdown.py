from weft.markdown import Block, format_inline, render_html, render_markdown


def test_list_then_paragraph():
    blocks = render_markdown("- a\n- b\n\ntext")
    assert blocks == [Block(kind="ul", items=("a", "b")), Block(kind="p", text="text")]


def test_headers():
    blocks = render_markdown("# One\n## Two\n### Three\n#### Four")
    assert [b.kind for b in blocks] == ["h1", "h2", "h3", "p"]
    assert blocks[2].text == "Three"
    assert blocks[3].text == "#### Four"


def test_open_list_is_closed_before_header_and_paragraph():
    html = render_html("- a\n# Head\n1. one\n2. two\nplain")
    assert html == "<ul><li>a</li></ul><h1>Head</h1><ol><li>one</li><li>two</li></ol><p>plain</p>"


def test_switching_list_kind_starts_a_new_list():
    blocks = render_markdown("1. one\n- bullet")
    assert blocks == [Block(kind="ol", items=("one",)), Block(kind="ul", items=("bullet",))]


def test_inline_formatting():
    assert format_inline("**Tabs:** 3 and `code`") == "<b>Tabs:</b> 3 and <code>code</code>"


def test_text_is_escaped_before_formatting():
    assert format_inline("<script>**x**</script>") == "&lt;script&gt;<b>x</b>&lt;/script&gt;"
    blocks = render_markdown("# <b>title</b>")
    assert blocks[0].text == "&lt;b&gt;title&lt;/b&gt;"
    assert render_html("- `<img src=x>`") == "<ul><li><code>&lt;img src=x&gt;</code></li></ul>"


def test_blank_input():
    assert render_markdown("") == []
    assert render_markdown(None) == []
    assert render_markdown("\n\n   \n") == []
