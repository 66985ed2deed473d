"""Built-in rule set for the MongoDB 2.x Java driver's ``DBCollection``.

Every constructor is intercepted to set up per-instance tracing context;
collection operations are intercepted by one method handler. Most
operations are overloaded, so each point pins the overload carrying the
full argument list by one parameter's declared type. The rule set is only
active when ``com.mongodb.tools.ConnectionPoolStat`` (2.x only) resolves.
"""

from __future__ import annotations

from weaveplan.domain.definition import PluginDefinition
from weaveplan.domain.matching import by_name, named
from weaveplan.domain.points import ConstructorInterceptPoint, MethodInterceptPoint
from weaveplan.domain.witness import WitnessRequirement
from weaveplan.plugins.hookspecs import hookimpl

ENHANCE_CLASS = "com.mongodb.DBCollection"
WITNESS_CLASS = "com.mongodb.tools.ConnectionPoolStat"
METHOD_HANDLER = "mongodb.v2.DBCollectionMethodInterceptor"

_DB_ENCODER = "com.mongodb.DBEncoder"
_DB_OBJECT = "com.mongodb.DBObject"
_READ_PREFERENCE = "com.mongodb.ReadPreference"

METHOD_PATTERNS = (
    named("find"),
    named("aggregate").taking(2, _READ_PREFERENCE),
    named("insert").taking(2, _DB_ENCODER),
    named("update").taking(5, _DB_ENCODER),
    named("remove").taking(2, _DB_ENCODER),
    named("findAndModify"),
    named("createIndex").taking(2, _DB_ENCODER),
    # db_command operations
    named("getCount").taking(6, "java.util.concurrent.TimeUnit"),
    named("drop"),
    named("dropIndexes"),
    named("rename").taking(1, "boolean"),
    named("group").taking(1, "boolean"),
    named("group").taking(1, _DB_OBJECT),
    named("distinct").taking(2, _READ_PREFERENCE),
    named("mapReduce").taking(0, "com.mongodb.MapReduceCommand"),
    named("mapReduce").taking(0, _DB_OBJECT),
    named("aggregate").taking(1, _READ_PREFERENCE),
    named("explainAggregate"),
)


def dbcollection_definition() -> PluginDefinition:
    return PluginDefinition(
        "mongodb-2.x/DBCollection",
        by_name(ENHANCE_CLASS),
        [
            ConstructorInterceptPoint(METHOD_HANDLER),
            *(MethodInterceptPoint(pattern, METHOD_HANDLER) for pattern in METHOD_PATTERNS),
        ],
        WitnessRequirement([WITNESS_CLASS]),
    )


class MongoDBCollectionPlugin:
    """Contributes the ``DBCollection`` rule set."""

    @hookimpl
    def register_plugin_definitions(self) -> list[PluginDefinition]:
        return [dbcollection_definition()]
