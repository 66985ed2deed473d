"""Built-in plugins registered directly by the registry bootstrap."""

from weaveplan.plugins.builtins.mongodb import MongoDBCollectionPlugin

BUILTIN_PLUGINS: dict[str, type] = {
    "mongodb": MongoDBCollectionPlugin,
}

__all__ = ["BUILTIN_PLUGINS", "MongoDBCollectionPlugin"]
