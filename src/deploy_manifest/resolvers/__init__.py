"""Manifest resolution engine.

This module provides the components that reconstruct a module's effective
configuration: property tables, parent chains, managed versions and the
dependency graph. All of them hang off a per-analysis
:class:`ResolverContext`.
"""

from deploy_manifest.resolvers.context import ResolverContext
from deploy_manifest.resolvers.graph import DependencyGraphWalker, flatten
from deploy_manifest.resolvers.managed import ManagedVersionResolver
from deploy_manifest.resolvers.parents import ParentChainWalker
from deploy_manifest.resolvers.properties import PropertyResolver, substitute

__all__ = [
    "DependencyGraphWalker",
    "ManagedVersionResolver",
    "ParentChainWalker",
    "PropertyResolver",
    "ResolverContext",
    "flatten",
    "substitute",
]
