"""Reduction of license details into summary counts and compliance flags."""

from deploy_manifest.models import (
    UNKNOWN_LICENSE,
    LicenseCompliance,
    LicenseDetail,
    LicenseSummary,
)


def summarize(
    details: list[LicenseDetail],
    by_type: dict[str, int],
    incompatible_count: int,
) -> tuple[LicenseSummary, LicenseCompliance]:
    """Compute license summary and compliance for a set of details.

    Args:
        details: One entry per visited dependency.
        by_type: License-name histogram built during aggregation.
        incompatible_count: Number of entries carrying an incompatible license.

    Returns:
        Tuple of (LicenseSummary, LicenseCompliance).
    """
    total = len(details)
    unknown = sum(1 for d in details if d.license.lower() == UNKNOWN_LICENSE)
    identified = total - unknown

    summary = LicenseSummary(
        total=total,
        identified=identified,
        unknown=unknown,
        by_type=dict(sorted(by_type.items())),
    )
    compliance = LicenseCompliance(
        has_incompatible_licenses=incompatible_count > 0,
        incompatible_count=incompatible_count,
        unknown_count=unknown,
        commercially_viable=incompatible_count == 0,
        requires_attribution=identified > 0,
    )
    return summary, compliance
