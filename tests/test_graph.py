import json

import pytest

from weft.errors import AcquisitionFailure
from weft.graph import EMPTY_SNAPSHOT, GraphSnapshot, load_graph, load_graph_or_empty, normalize_domain


def test_integer_ids_become_strings(snapshot):
    assert [t.id for t in snapshot.tabs] == ["0", "1", "2", "3", "4"]
    assert snapshot.get_tab("0").group_id == "1"
    assert snapshot.edges[0].source == "0"
    assert snapshot.get_group("1").tab_ids == ("0", "1", "2")


def test_duplicate_of_zero_is_still_a_duplicate(snapshot):
    mirror = snapshot.get_tab("2")
    assert mirror.duplicate_of == "0"
    assert mirror.is_duplicate
    assert not snapshot.get_tab("0").is_duplicate


def test_negative_group_id_means_ungrouped_and_domain_is_derived(snapshot):
    tab = snapshot.get_tab("4")
    assert tab.group_id is None
    assert tab.title is None
    assert tab.domain == "example.org"


def test_camel_case_keys_from_the_extension_are_accepted():
    snap = GraphSnapshot.from_dict(
        {
            "tabs": [
                {"id": "t1", "url": "https://a.com", "groupId": "g7", "duplicateOf": "t0", "addedAt": 1700000000000},
            ],
            "groups": [{"id": "g7", "label": "A", "tabIds": ["t1", "t1"]}],
        }
    )
    tab = snap.get_tab("t1")
    assert tab.group_id == "g7"
    assert tab.duplicate_of == "t0"
    assert tab.added_at == 1700000000000
    group = snap.get_group("g7")
    assert group.tab_ids == ("t1", "t1")
    assert group.size == 2


def test_group_size_falls_back_to_member_count():
    snap = GraphSnapshot.from_dict(
        {
            "tabs": [],
            "groups": [
                {"id": 1, "label": "a", "tab_ids": [1, 2, 3]},
                {"id": 2, "label": "b", "tab_ids": [1], "size": 0},
                {"id": 3, "label": "c", "tab_ids": [1], "size": 10},
                {"id": 4, "label": "d", "tab_ids": [1], "size": "big"},
            ],
        }
    )
    assert [g.size for g in snap.groups] == [3, 1, 10, 1]


def test_malformed_entries_are_skipped_not_fatal(capsys):
    snap = GraphSnapshot.from_dict(
        {
            "tabs": [
                "not a tab",
                {"url": "https://no-id.com"},
                {"id": "ok", "url": 42, "title": ["x"], "keywords": "python", "weight": "heavy"},
            ],
            "edges": [{"source": "ok"}, {"source": "ok", "target": "ok", "weight": "strong"}],
            "groups": "nope",
        }
    )
    assert [t.id for t in snap.tabs] == ["ok"]
    tab = snap.tabs[0]
    assert tab.url == ""
    assert tab.title is None
    assert tab.keywords == ()
    assert len(snap.edges) == 1
    assert snap.edges[0].weight == 0.0
    assert snap.edges[0].reason is None
    assert snap.groups == ()
    err = capsys.readouterr().err
    assert "[WARN] Skipped 2 malformed tab entries." in err
    assert "[WARN] Skipped 1 malformed edge entries." in err


def test_keywords_are_deduplicated_in_order():
    snap = GraphSnapshot.from_dict({"tabs": [{"id": 1, "keywords": ["b", "a", "b", "", 3]}]})
    assert snap.tabs[0].keywords == ("b", "a")


def test_tabs_for_group_drops_unknown_members_and_keeps_repeats():
    snap = GraphSnapshot.from_dict(
        {
            "tabs": [{"id": 1}, {"id": 2}],
            "groups": [{"id": 1, "label": "g", "tab_ids": [2, 404, 1, 2]}],
        }
    )
    assert [t.id for t in snap.tabs_for_group("1")] == ["2", "1", "2"]
    assert snap.tabs_for_group("missing") == []


def test_stats_count_primary_tabs_and_domains(snapshot):
    stats = snapshot.stats()
    assert stats.tab_count == 4
    assert stats.domain_count == 4
    assert stats.group_count == 2
    assert stats.edge_count == 4


def test_to_dict_omits_absent_fields(snapshot):
    data = snapshot.to_dict()
    untitled = data["tabs"][4]
    assert "title" not in untitled
    assert "group_id" not in untitled
    assert data["tabs"][2]["duplicate_of"] == "0"
    assert data["groups"][0] == {"id": "2", "label": "Rust news", "tab_ids": ["3"], "size": 1}


def test_normalize_domain():
    assert normalize_domain("https://WWW.Example.com:8080/path") == "example.com"


def test_load_graph_reads_file(tmp_path):
    path = tmp_path / "tab_graph.json"
    path.write_text(json.dumps({"tabs": [{"id": 1, "url": "https://a.com"}]}), encoding="utf-8")
    assert load_graph(str(path)).get_tab("1").domain == "a.com"


def test_load_graph_failures(tmp_path, capsys):
    missing = str(tmp_path / "missing.json")
    with pytest.raises(AcquisitionFailure):
        load_graph(missing)

    windows = tmp_path / "tabs_backup.json"
    windows.write_text(json.dumps([{"browser": "chrome", "tabs": []}]), encoding="utf-8")
    with pytest.raises(AcquisitionFailure):
        load_graph(str(windows))

    assert load_graph_or_empty(missing) is EMPTY_SNAPSHOT
    assert "[WARN]" in capsys.readouterr().err


def test_is_empty_tracks_tabs_only():
    assert EMPTY_SNAPSHOT.is_empty
    assert GraphSnapshot.from_dict({"tabs": [], "groups": [{"id": 1, "label": "x"}]}).is_empty
    assert not GraphSnapshot.from_dict({"tabs": [{"id": 1}]}).is_empty
