from wikipath.utils.parsing import extract_links, is_in_scope, normalize_url

BASE = "https://en.wikipedia.org/wiki/Knowledge"
HOST = "en.wikipedia.org"


def test_normalize_url_strips_fragment_only():
    assert normalize_url("https://en.wikipedia.org/wiki/A#History") == "https://en.wikipedia.org/wiki/A"
    assert normalize_url("https://en.wikipedia.org/w/index.php?x=1") == "https://en.wikipedia.org/w/index.php?x=1"


def test_is_in_scope():
    assert is_in_scope("https://en.wikipedia.org/wiki/A", HOST)
    assert not is_in_scope("https://en.wikipedia.org/w/index.php?title=A", HOST)
    assert not is_in_scope("https://de.wikipedia.org/wiki/A", HOST)
    assert not is_in_scope("/wiki/A", HOST)


def test_extract_links_resolves_filters_and_keeps_document_order():
    html = """
    <html><body>
      <a href="/wiki/Fact">fact</a>
      <a href="//en.wikipedia.org/wiki/Belief">belief</a>
      <a href="https://de.wikipedia.org/wiki/Wissen">german</a>
      <a href="/w/index.php?title=Knowledge&action=edit">edit</a>
      <a href="/wiki/Fact#Etymology">fact again</a>
      <a href="#cite_note-1">footnote</a>
      <a href="mailto:someone@example.com">mail</a>
      <a>no href</a>
      <a href="">empty</a>
      <a href="Truth">relative</a>
    </body></html>
    """

    links = extract_links(html, BASE, HOST)

    assert links == [
        "https://en.wikipedia.org/wiki/Fact",
        "https://en.wikipedia.org/wiki/Belief",
        "https://en.wikipedia.org/wiki/Knowledge",
        "https://en.wikipedia.org/wiki/Truth",
    ]


def test_extract_links_skips_unparseable_hrefs():
    html = '<a href="http://[broken/wiki/A">bad</a><a href="/wiki/B">ok</a>'

    assert extract_links(html, BASE, HOST) == ["https://en.wikipedia.org/wiki/B"]
