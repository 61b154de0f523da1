# tests/core_tests/test_containment_scenarios.py
# This file is part of Regrada - A DCR Choreography Toolkit
#
# Containment engine scenarios: choice exclusions, cascades, cycles, id reuse

"""Scenario tests for container membership and its derived relations.

Every scenario starts from the sample choreography (events e0, e1, e2 with
e0 -->* e1 and e1 *--> e2) and edits it through the editor.
"""

import pytest

from core import family, reparent
from model import ContainerKind, NestType, RelationType


def choice_pairs(chor, container_id):
    """Return the (source, target) pairs of the exclusions a container owns."""
    pairs = set()
    for rel in chor.scoped_relations(container_id):
        assert rel.type is RelationType.EXCLUDE
        assert rel.hidden
        pairs.add((rel.source, rel.target))
    return pairs


def assert_no_duplicates(chor):
    keys = [rel.key for rel in chor.relations.values()]
    assert len(keys) == len(set(keys))


class TestChoiceExclusions:
    """A choice owns one hidden exclusion per ordered pair of children."""

    def test_three_children_give_six_exclusions(self, editor):
        nid = editor.create_container(ContainerKind.NEST, ["e0", "e1", "e2"], NestType.CHOICE)
        chor = editor.choreography

        assert nid == "n0"
        assert choice_pairs(chor, nid) == {
            ("e0", "e1"), ("e1", "e0"),
            ("e0", "e2"), ("e2", "e0"),
            ("e1", "e2"), ("e2", "e1"),
        }
        assert "x-e0-e1" in chor.relations
        assert_no_duplicates(chor)

    def test_switching_to_group_removes_all_six(self, editor):
        nid = editor.create_container(ContainerKind.NEST, ["e0", "e1", "e2"], NestType.CHOICE)
        editor.change_container_type(nid, ContainerKind.NEST, NestType.GROUP)
        chor = editor.choreography

        assert chor.scoped_relations(nid) == []
        assert set(chor.relations) == {"c-e0-e1", "r-e1-e2"}

    def test_switching_back_to_choice_regenerates(self, editor):
        nid = editor.create_container(ContainerKind.NEST, ["e0", "e1"], NestType.GROUP)
        assert choice_pairs(editor.choreography, nid) == set()

        editor.change_container_type(nid, ContainerKind.NEST, NestType.CHOICE)
        assert choice_pairs(editor.choreography, nid) == {("e0", "e1"), ("e1", "e0")}

    def test_leaving_child_takes_its_pairs(self, editor):
        nid = editor.create_container(ContainerKind.NEST, ["e0", "e1", "e2"], NestType.CHOICE)
        assert editor.move_node("e2", None)

        assert choice_pairs(editor.choreography, nid) == {("e0", "e1"), ("e1", "e0")}
        assert "x-e0-e2" not in editor.choreography.relations

    def test_joining_child_gets_pairs(self, editor):
        nid = editor.create_container(ContainerKind.NEST, ["e0", "e1"], NestType.CHOICE)
        assert editor.move_node("e2", nid)

        assert len(choice_pairs(editor.choreography, nid)) == 6

    def test_new_event_inside_choice(self, editor, add_events):
        nid = editor.create_container(ContainerKind.NEST, ["e0", "e1"], NestType.CHOICE)
        (new_id,) = add_events(editor, 1, parent=nid)

        assert (new_id, "e0") in choice_pairs(editor.choreography, nid)
        assert len(choice_pairs(editor.choreography, nid)) == 6

    def test_explicit_exclusion_is_adopted_then_released(self, editor):
        rid = editor.create_relation("e0", "e1", RelationType.EXCLUDE)
        nid = editor.create_container(ContainerKind.NEST, ["e0", "e1"], NestType.CHOICE)
        chor = editor.choreography

        adopted = chor.relations[rid]
        assert adopted.scope == nid and adopted.hidden
        assert "x-e0-e1" not in chor.relations
        assert choice_pairs(chor, nid) == {("e0", "e1"), ("e1", "e0")}
        assert_no_duplicates(chor)

        editor.change_container_type(nid, ContainerKind.NEST, NestType.GROUP)
        assert chor.relations[rid].scope is None
        assert not chor.relations[rid].hidden
        assert "x-e1-e0" not in chor.relations

    def test_owned_exclusion_cannot_be_deleted(self, editor, fresh_logs):
        editor.create_container(ContainerKind.NEST, ["e0", "e1"], NestType.CHOICE)
        assert editor.delete_relation("x-e0-e1") is False
        assert "x-e0-e1" in editor.choreography.relations
        assert "relation is owned by a choice" in fresh_logs.logs()[-1].message


class TestCascadingRemoval:
    """Emptied containers disappear, and so do their emptied ancestors."""

    def test_moving_last_child_out_removes_container(self, editor, fresh_logs):
        nid = editor.create_container(ContainerKind.NEST, ["e0"])
        assert editor.move_node("e0", None)

        assert nid not in editor.choreography.containers
        assert editor.get_node("e0").parent is None
        assert any(entry.message == "Removed empty nest: n0." for entry in fresh_logs.logs())

    def test_deleting_last_child_cascades_to_top(self, editor):
        inner = editor.create_container(ContainerKind.NEST, ["e0"])
        outer = editor.create_container(ContainerKind.NEST, [inner])
        removed = editor.delete_nodes(["e0"])

        assert removed == ["e0", inner, outer]
        assert editor.choreography.containers == {}

    def test_cascade_stops_at_non_empty_ancestor(self, editor):
        inner = editor.create_container(ContainerKind.NEST, ["e0"])
        outer = editor.create_container(ContainerKind.NEST, [inner, "e1"])
        editor.delete_nodes(["e0"])

        assert inner not in editor.choreography.containers
        assert editor.children(outer) == ["e1"]

    def test_deleting_container_takes_descendants_and_relations(self, editor):
        nid = editor.create_container(ContainerKind.NEST, ["e0", "e1"])
        removed = editor.delete_nodes([nid])

        assert set(removed) == {nid, "e0", "e1"}
        assert list(editor.choreography.events) == ["e2"]
        assert editor.choreography.relations == {}

    def test_wrapping_all_children_of_a_nest_removes_it(self, editor):
        old = editor.create_container(ContainerKind.NEST, ["e0"])
        new = editor.create_container(ContainerKind.SUBPROCESS, ["e0"])

        assert old not in editor.choreography.containers
        assert editor.get_node("e0").parent == new


class TestReparenting:
    """Invalid moves are refused and leave the model untouched."""

    def test_self_parent_rejected(self, editor, fresh_logs):
        nid = editor.create_container(ContainerKind.NEST, ["e0"])
        assert editor.move_node(nid, nid) is False
        assert editor.get_node(nid).parent is None
        assert "cannot contain itself" in fresh_logs.logs()[-1].message

    def test_cycle_rejected(self, editor, fresh_logs):
        inner = editor.create_container(ContainerKind.NEST, ["e0"])
        outer = editor.create_container(ContainerKind.NEST, [inner])

        assert editor.move_node(outer, inner) is False
        assert editor.get_node(outer).parent is None
        assert editor.get_node(inner).parent == outer
        assert "descendant" in fresh_logs.logs()[-1].message

    def test_event_is_not_a_parent(self, editor):
        assert reparent(editor.choreography, "e0", "e1") is False
        assert editor.get_node("e0").parent is None

    def test_same_parent_is_noop(self, editor):
        nid = editor.create_container(ContainerKind.NEST, ["e0", "e1"])
        assert editor.move_node("e0", nid) is True
        assert editor.children(nid) == ["e0", "e1"]

    def test_family_is_transitive(self, editor):
        inner = editor.create_container(ContainerKind.NEST, ["e0"])
        outer = editor.create_container(ContainerKind.NEST, [inner, "e1"])

        assert family(editor.choreography, outer) == {inner, "e0", "e1"}
        assert editor.family(inner) == {"e0"}

    def test_unknown_node_raises(self, editor):
        with pytest.raises(KeyError):
            editor.move_node("e9", None)


class TestIdentifierReuse:
    """Freed ids come back smallest first, per kind."""

    def test_deleted_event_ids_are_reused_ascending(self, editor, add_events):
        editor.delete_nodes(["e1", "e0"])
        assert add_events(editor, 3) == ["e0", "e1", "e3"]

    def test_removed_nest_id_is_reused(self, editor):
        first = editor.create_container(ContainerKind.NEST, ["e0"])
        editor.create_container(ContainerKind.NEST, ["e1"])
        editor.move_node("e0", None)

        assert editor.create_container(ContainerKind.NEST, ["e2"]) == first


class TestKindConversion:
    """Nest <-> subprocess conversion moves the container between id pools."""

    def test_nest_becomes_subprocess(self, editor):
        nid = editor.create_container(ContainerKind.NEST, ["e0", "e1"], NestType.CHOICE)
        sid = editor.change_container_type(nid, ContainerKind.SUBPROCESS)
        chor = editor.choreography

        assert (nid, sid) == ("n0", "s0")
        container = chor.containers[sid]
        assert container.is_subprocess and container.label == "s0"
        assert editor.children(sid) == ["e0", "e1"]
        assert chor.scoped_relations(sid) == []
        assert chor.nest_ids.pending() == [0, 1]

    def test_subprocess_back_to_nest_reuses_freed_id(self, editor):
        nid = editor.create_container(ContainerKind.NEST, ["e0"])
        sid = editor.change_container_type(nid, ContainerKind.SUBPROCESS)
        back = editor.change_container_type(sid, ContainerKind.NEST)

        assert back == "n0"
        assert editor.choreography.subprocess_ids.pending() == [0, 1]
        assert editor.get_node(back).nest_type is NestType.GROUP

    def test_custom_label_survives_conversion(self, editor):
        nid = editor.create_container(ContainerKind.NEST, ["e0"], label="review")
        sid = editor.change_container_type(nid, ContainerKind.SUBPROCESS)
        assert editor.get_node(sid).label == "review"

    def test_relations_follow_the_renamed_container(self, editor):
        nid = editor.create_container(ContainerKind.NEST, ["e0"])
        editor.create_relation("e2", nid, RelationType.INCLUDE)
        sid = editor.change_container_type(nid, ContainerKind.SUBPROCESS)

        assert "i-e2-s0" in editor.choreography.relations
        assert editor.get_relation("i-e2-s0").target == sid

    def test_spawns_dropped_when_subprocess_becomes_nest(self, editor):
        sid = editor.create_container(ContainerKind.SUBPROCESS, ["e1"])
        rid = editor.create_relation("e2", sid, RelationType.SPAWN)
        editor.change_container_type(sid, ContainerKind.NEST)

        assert rid not in editor.choreography.relations
