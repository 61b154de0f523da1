# model/sample.py

"""
The starter choreography a fresh editing session opens with: a prosumer reads
a document, submits it to a second prosumer, who accepts it.
"""

from .choreography import Choreography
from .event import Event, EventKind
from .id_pool import IdPool
from .relation import Relation, RelationType, relation_id
from .role import Parameter, Role
from .shapes import Field, InputShape

SAMPLE_SECURITY = "Public flows P"


def build_sample_choreography() -> Choreography:
    chor = Choreography(security=SAMPLE_SECURITY)

    chor.events["e0"] = Event(
        "e0", "e0", "readDocument", "Public", EventKind.INPUT,
        input=InputShape.of_record([Field("size", "Integer"), Field("name", "String")]),
        initiators=["P(id=1)"],
    )
    chor.events["e1"] = Event(
        "e1", "e1", "submit", "Public", EventKind.INPUT,
        initiators=["P(id=1)"], receivers=["P(id=2)"],
    )
    chor.events["e2"] = Event(
        "e2", "e2", "accept", "Public", EventKind.INPUT,
        initiators=["P(id=2)"], receivers=["P(id=1)"],
    )
    chor.event_ids = IdPool("e", 3)

    for source, target, rtype in (
        ("e0", "e1", RelationType.CONDITION),
        ("e1", "e2", RelationType.RESPONSE),
    ):
        rid = relation_id(source, target, rtype)
        chor.relations[rid] = Relation(rid, source, target, rtype)

    chor.roles = [
        Role("Prosumer", "P", [Parameter("id", "Integer")], ["P(id=1)", "P(id=2)"]),
        Role("Public", "Public"),
    ]
    return chor
