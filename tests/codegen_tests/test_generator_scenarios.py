# tests/codegen_tests/test_generator_scenarios.py
# This file is part of Regrada - A DCR Choreography Toolkit
#
# Code generator output layout tests

"""Tests for the textual notation produced by the code generator."""

from codegen import GLOBAL_SCOPE, generate, partition, render_event
from model import ContainerKind, Event, EventKind, InputShape, NestType, RelationType

SAMPLE_TEXT = "\n".join([
    "P(id:Integer)",
    "Public",
    ";",
    "Public flows P",
    ";",
    "(e0:readDocument) (Public) [?:{size:Integer; name:String}] [P(id=1)]",
    "(e1:submit) (Public) [?] [P(id=1) -> P(id=2)]",
    "(e2:accept) (Public) [?] [P(id=2) -> P(id=1)]",
    ";",
    "e0 -->* e1",
    "e1 *--> e2",
])


class TestEventLines:
    """Single event line rendering."""

    def test_markers(self):
        event = Event("e5", "e5", "ping", "Public", initiators=["P(id=1)"])
        event.marking.included = False
        event.marking.pending = True
        assert render_event(event) == "%!(e5:ping) (Public) [?] [P(id=1)]"

    def test_primitive_input(self):
        event = Event("e5", "e5", "count", "Public", input=InputShape.primitive("Integer"),
                      initiators=["P(id=1)"])
        assert render_event(event) == "(e5:count) (Public) [?:Integer] [P(id=1)]"

    def test_computation(self):
        event = Event("e5", "total", "sum", "Private", EventKind.COMPUTATION,
                      expression="a + b", initiators=["P(id=1)"], receivers=["P(id=2)", "Public"])
        assert render_event(event) == "(total:sum) (Private) [a + b] [P(id=1) -> P(id=2), Public]"


class TestSampleDocument:

    def test_full_text(self, sample):
        assert generate(sample).text == SAMPLE_TEXT

    def test_event_line_mapping(self, sample):
        code = generate(sample)
        assert list(code.event_lines) == ["e0", "e1", "e2"]
        assert code.event_lines["e1"] == "(e1:submit) (Public) [?] [P(id=1) -> P(id=2)]"

    def test_relations_use_labels(self, sample):
        sample.events["e1"].label = "send"
        lines = generate(sample).text.splitlines()
        assert "e0 -->* send" in lines
        assert "send *--> e2" in lines

    def test_guard(self, editor):
        editor.update_relation("c-e0-e1", guard="size > 0")
        assert "e0 -->* e1 [size > 0]" in editor.generate().text.splitlines()


class TestPartitioning:
    """Elements are grouped by their innermost container."""

    def test_relation_goes_with_its_source(self, editor):
        nid = editor.create_container(ContainerKind.NEST, ["e1"])
        parts = partition(editor.choreography)

        assert [r.id for r in parts[GLOBAL_SCOPE].relations] == ["c-e0-e1"]
        assert [r.id for r in parts[nid].relations] == ["r-e1-e2"]
        assert [e.id for e in parts[nid].events] == ["e1"]
        assert [n.id for n in parts[GLOBAL_SCOPE].nests] == [nid]

    def test_nests_are_transparent(self, editor):
        editor.create_container(ContainerKind.NEST, ["e1"])
        lines = editor.generate().text.splitlines()

        assert lines[5:] == [
            "(e0:readDocument) (Public) [?:{size:Integer; name:String}] [P(id=1)]",
            "(e2:accept) (Public) [?] [P(id=2) -> P(id=1)]",
            "(e1:submit) (Public) [?] [P(id=1) -> P(id=2)]",
            ";",
            "e0 -->* e1",
            "e1 *--> e2",
        ]

    def test_choice_exclusions_are_rendered(self, editor):
        editor.create_container(ContainerKind.NEST, ["e1", "e2"], NestType.CHOICE)
        lines = editor.generate().text.splitlines()
        assert "e1 -->% e2" in lines
        assert "e2 -->% e1" in lines


class TestSpawn:
    """Subprocess bodies render inside the spawn blocks that target them."""

    def test_spawn_block(self, editor):
        eid = editor.create_event(EventKind.INPUT, ["P(id=2)"], name="review", security="Public")
        sid = editor.create_container(ContainerKind.SUBPROCESS, [eid])
        editor.create_relation("e2", sid, RelationType.SPAWN)
        code = editor.generate()

        assert code.text.splitlines()[-5:] == [
            "e1 *--> e2",
            "e2 -->> {",
            "\t(e3:review) (Public) [?] [P(id=2)]",
            "\t;",
            "}",
        ]
        assert code.event_lines[eid] == "\t(e3:review) (Public) [?] [P(id=2)]"

    def test_nested_spawn_indents_per_level(self, editor):
        outer_event = editor.create_event(EventKind.INPUT, ["P(id=2)"], name="review", security="Public")
        inner_event = editor.create_event(EventKind.INPUT, ["P(id=1)"], name="fix", security="Public")
        inner = editor.create_container(ContainerKind.SUBPROCESS, [inner_event])
        outer = editor.create_container(ContainerKind.SUBPROCESS, [outer_event, inner])
        editor.create_relation("e2", outer, RelationType.SPAWN)
        editor.create_relation(outer_event, inner, RelationType.SPAWN)

        assert editor.generate().text.splitlines()[-8:] == [
            "e2 -->> {",
            "\t(e3:review) (Public) [?] [P(id=2)]",
            "\t;",
            "\te3 -->> {",
            "\t\t(e4:fix) (Public) [?] [P(id=1)]",
            "\t\t;",
            "\t}",
            "}",
        ]

    def test_unspawned_subprocess_is_not_rendered(self, editor):
        sid = editor.create_container(ContainerKind.SUBPROCESS, ["e2"])
        code = editor.generate()

        assert "e2" not in code.event_lines
        assert sid not in code.text

    def test_recursive_spawn_is_left_empty(self, editor):
        sid = editor.create_container(ContainerKind.SUBPROCESS, ["e2"])
        editor.create_relation("e1", sid, RelationType.SPAWN)
        editor.create_relation("e2", sid, RelationType.SPAWN)
        lines = editor.generate().text.splitlines()

        assert lines[-5:] == ["\t(e2:accept) (Public) [?] [P(id=2) -> P(id=1)]", "\t;", "\te2 -->> {", "\t}", "}"]

    def test_subprocess_spawned_twice_renders_each_time(self, editor):
        first = editor.create_event(EventKind.INPUT, ["P(id=1)"], name="three", security="Public")
        twice = editor.create_container(ContainerKind.SUBPROCESS, [first])
        second = editor.create_event(EventKind.INPUT, ["P(id=2)"], name="four", security="Public")
        once = editor.create_container(ContainerKind.SUBPROCESS, [second])
        editor.create_relation("e0", twice, RelationType.SPAWN)
        editor.create_relation("e1", twice, RelationType.SPAWN)
        editor.create_relation("e2", once, RelationType.SPAWN)
        code = editor.generate()

        assert [event_id for event_id, _ in code.rendered] == ["e0", "e1", "e2", "e3", "e3", "e4"]
        assert list(code.event_lines) == ["e0", "e1", "e2", "e3", "e4"]
        assert code.text.count("\t(e3:three) (Public) [?] [P(id=1)]") == 2
