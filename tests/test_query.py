from weft.graph import GraphSnapshot, Group, Tab
from weft.query import Query, filter_groups, filter_tabs, matches_group, matches_tab, parse_query


def _tab(**overrides):
    base = {
        "id": "t1",
        "url": "https://github.com/psf/requests",
        "title": "Requests: HTTP for Humans",
        "domain": "github.com",
        "keywords": ("http", "python"),
    }
    base.update(overrides)
    return Tab(**base)


def test_parse_query_extracts_tokens_and_free_text():
    q = parse_query("  Python  @GitHub   tips #Async ")
    assert q == Query(domain="github", keyword="async", text="python tips")


def test_parse_query_keeps_only_first_filter_but_strips_all_tokens():
    q = parse_query("@one @two #a #b rest")
    assert q.domain == "one"
    assert q.keyword == "a"
    assert q.text == "rest"


def test_parse_empty_and_blank_queries():
    assert parse_query("").is_empty
    assert parse_query(None).is_empty
    assert parse_query("   ").is_empty
    assert not parse_query("@x").is_empty


def test_domain_filter_is_a_case_insensitive_substring():
    q = parse_query("@hub")
    assert matches_tab(_tab(), q)
    assert matches_tab(_tab(domain="GitHub.com"), q)
    assert not matches_tab(_tab(domain="gitlab.com"), q)
    assert not matches_tab(_tab(domain=None), q)


def test_keyword_filter_matches_any_keyword_substring():
    assert matches_tab(_tab(), parse_query("#pyth"))
    assert not matches_tab(_tab(), parse_query("#rust"))
    assert not matches_tab(_tab(keywords=()), parse_query("#http"))


def test_free_text_matches_title_or_url():
    assert matches_tab(_tab(), parse_query("humans"))
    assert matches_tab(_tab(), parse_query("psf/requests"))
    assert not matches_tab(_tab(), parse_query("django"))
    assert matches_tab(_tab(title=None), parse_query("psf"))


def test_all_filters_must_hold():
    assert matches_tab(_tab(), parse_query("humans @github #http"))
    assert not matches_tab(_tab(), parse_query("humans @github #rust"))


def test_duplicates_never_match(snapshot):
    mirror = snapshot.get_tab("2")
    for raw in ("", "mirror", "@github", "#python", "cpython @github #python"):
        assert not matches_tab(mirror, parse_query(raw))


def test_empty_query_matches_every_primary_tab(snapshot):
    assert [t.id for t in filter_tabs(snapshot, parse_query(""))] == ["0", "1", "3", "4"]


def test_domain_only_query_on_snapshot(snapshot):
    assert [t.id for t in filter_tabs(snapshot, parse_query("@python"))] == ["1"]
    assert [t.id for t in filter_tabs(snapshot, parse_query("@github"))] == ["0"]


def test_group_filters_are_existential():
    group = Group(id="g1", label="Web libraries", tab_ids=("a", "b"), size=2)
    tabs = [
        _tab(id="a", domain="github.com", keywords=("http",)),
        _tab(id="b", domain="pypi.org", keywords=("packaging",), title="Packaging guide", url="https://pypi.org/"),
    ]
    assert matches_group(group, tabs, parse_query("@pypi #http"))
    assert not matches_group(group, tabs, parse_query("@gitlab"))
    assert matches_group(group, tabs, parse_query("libraries"))
    assert matches_group(group, tabs, parse_query("packaging guide"))
    assert not matches_group(group, tabs, parse_query("kernel"))
    assert matches_group(group, [], parse_query(""))


def test_filter_groups_orders_by_size(snapshot):
    assert [g.label for g in filter_groups(snapshot, parse_query(""))] == ["Python internals", "Rust news"]
    assert [g.label for g in filter_groups(snapshot, parse_query("rust"))] == ["Rust news"]
    assert [g.label for g in filter_groups(snapshot, parse_query("#asyncio"))] == ["Python internals"]


def test_filter_groups_is_stable_on_equal_sizes():
    snap = GraphSnapshot.from_dict(
        {
            "tabs": [],
            "groups": [
                {"id": 1, "label": "first", "tab_ids": [], "size": 2},
                {"id": 2, "label": "second", "tab_ids": [], "size": 2},
                {"id": 3, "label": "third", "tab_ids": [], "size": 5},
            ],
        }
    )
    assert [g.label for g in filter_groups(snap, parse_query(""))] == ["third", "first", "second"]


def test_filtering_is_deterministic(snapshot):
    q = parse_query("python")
    assert filter_tabs(snapshot, q) == filter_tabs(snapshot, parse_query("python"))


def test_keyword_filter_ignores_keyword_case():
    assert matches_tab(_tab(keywords=("HTTP", "Python")), parse_query("#http"))
    assert matches_tab(_tab(keywords=("HTTP",)), parse_query("#Http"))
