"""Report collectors.

Collectors consume the resolution engine and produce the report sections:
licenses, dependency tree and build properties.
"""

from deploy_manifest.collectors.compliance import summarize
from deploy_manifest.collectors.dependencies import DependencyTreeCollector
from deploy_manifest.collectors.licenses import LicenseCollector, tokenize_license
from deploy_manifest.collectors.properties import PropertyCollector

__all__ = [
    "DependencyTreeCollector",
    "LicenseCollector",
    "PropertyCollector",
    "summarize",
    "tokenize_license",
]
