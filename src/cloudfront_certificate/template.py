"""Attach a certificate to the CloudFront distribution in a CloudFormation template."""

from __future__ import annotations

from typing import Any

from cloudfront_certificate.domain.models import ViewerCertificate


def patch_distribution(
    template: dict[str, Any],
    resource_name: str,
    certificate_arn: str,
    minimum_protocol_version: str | None = None,
) -> ViewerCertificate:
    """
    Replace the distribution's ViewerCertificate block.

    Raises KeyError when ``resource_name`` is not in the template's
    Resources; that is a configuration mistake, not a runtime condition.
    """
    viewer = ViewerCertificate(
        acm_certificate_arn=certificate_arn,
        minimum_protocol_version=minimum_protocol_version,
    )
    resource = template["Resources"][resource_name]
    distribution_config = resource.setdefault("Properties", {}).setdefault(
        "DistributionConfig", {}
    )
    distribution_config["ViewerCertificate"] = viewer.to_template()
    return viewer
