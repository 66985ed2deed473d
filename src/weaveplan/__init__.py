"""weaveplan — declarative interception rule sets for tracing agents.

A :class:`PluginDefinition` names one target type, the constructors and
overloaded methods to intercept, and the witness types that must be present
for any of it to apply. The weaving engine asks it for an enhancement plan
on every class-load event.
"""

from weaveplan.domain.definition import PluginDefinition
from weaveplan.domain.elements import ElementDescription, TypeDescription, constructor, method
from weaveplan.domain.errors import ConfigurationConflict, DefinitionError, InvalidPosition
from weaveplan.domain.matching import (
    ArgumentConstraint,
    ClassMatch,
    MethodSignaturePattern,
    by_name,
    named,
    takes_argument_with_type,
)
from weaveplan.domain.points import (
    ConstructorInterceptPoint,
    InterceptDirective,
    InterceptPoint,
    MethodInterceptPoint,
    resolve,
)
from weaveplan.domain.types import ElementKind
from weaveplan.domain.witness import TypeResolver, WitnessRequirement

__version__ = "0.1.0"

__all__ = [
    "ArgumentConstraint",
    "ClassMatch",
    "ConfigurationConflict",
    "ConstructorInterceptPoint",
    "DefinitionError",
    "ElementDescription",
    "ElementKind",
    "InterceptDirective",
    "InterceptPoint",
    "InvalidPosition",
    "MethodInterceptPoint",
    "MethodSignaturePattern",
    "PluginDefinition",
    "TypeDescription",
    "TypeResolver",
    "WitnessRequirement",
    "__version__",
    "by_name",
    "constructor",
    "method",
    "named",
    "resolve",
    "takes_argument_with_type",
]
