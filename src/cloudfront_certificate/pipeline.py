"""
Pipeline — the certificate workflow, run once per deployment.

Stages are connected via flat_map, so a failure at any stage skips the rest:

  provision(context)
    → publish validation records (waits for ACM's challenges first)
      → wait for ISSUED
        → patch the distribution's ViewerCertificate

The template is touched only by the last stage. A run that fails anywhere
earlier leaves it exactly as the host tool generated it, and the next
deployment picks up the same certificate and records where this one stopped.
"""

from __future__ import annotations

from typing import Any

import structlog

from cloudfront_certificate.domain.models import (
    CertificateDetail,
    ProvisioningContext,
    RunReport,
    ViewerCertificate,
)
from cloudfront_certificate.issuance import IssuanceWaiter
from cloudfront_certificate.provisioner import CertificateProvisioner
from cloudfront_certificate.railway import ErrorCode
from cloudfront_certificate.railway.result import Result
from cloudfront_certificate.template import patch_distribution
from cloudfront_certificate.validation import ValidationRecordPublisher

log = structlog.get_logger()


def _await_issuance(
    context: ProvisioningContext,
    waiter: IssuanceWaiter,
) -> Result[CertificateDetail | str]:
    arn = context.require_certificate()
    if not context.wait_for_issuance:
        log.info("pipeline.issuance_wait_disabled", certificate_arn=arn)
        return Result.success(arn)
    return waiter.wait(arn, context.issuance_attempts)


def _attach(context: ProvisioningContext, template: dict[str, Any]) -> Result[ViewerCertificate]:
    return Result.from_computation(
        lambda: patch_distribution(
            template,
            context.distribution_resource,
            context.require_certificate(),
            context.minimum_protocol_version,
        ),
        ErrorCode.CONFIGURATION_ERROR,
        f"Cannot attach certificate to resource {context.distribution_resource!r}",
    ).peek(
        lambda viewer: log.info(
            "pipeline.certificate_attached",
            resource=context.distribution_resource,
            certificate_arn=viewer.acm_certificate_arn,
            minimum_protocol_version=viewer.minimum_protocol_version,
        )
    )


def _validate_and_attach(
    context: ProvisioningContext,
    template: dict[str, Any],
    publisher: ValidationRecordPublisher,
    waiter: IssuanceWaiter,
) -> Result[RunReport]:
    arn = context.require_certificate()
    return (
        publisher.publish(arn, len(context.domains), context.validation_retries)
        .flat_map(lambda published: _await_issuance(context, waiter).map(lambda _: published))
        .flat_map(
            lambda published: _attach(context, template).map(
                lambda viewer: RunReport(
                    certificate_arn=arn,
                    records_published=published,
                    viewer_certificate=viewer,
                )
            )
        )
    )


def run_pipeline(
    context: ProvisioningContext | None,
    template: dict[str, Any],
    provisioner: CertificateProvisioner,
    publisher: ValidationRecordPublisher,
    waiter: IssuanceWaiter,
) -> Result[RunReport]:
    """
    Execute the full certificate workflow for one deployment.

    ``context`` is None when no domain is configured; the run is then a
    successful no-op that touches neither AWS nor the template.

    Returns Result[RunReport] on success, or the Failure of the first stage
    that failed.
    """
    if context is None:
        log.info("pipeline.skipped", reason="no domain configured")
        return Result.success(RunReport(skipped=True))

    log.info(
        "pipeline.starting",
        domain=context.domains.primary,
        alternative_names=list(context.domains.alternative_names),
        resource=context.distribution_resource,
    )
    return provisioner.provision(context).flat_map(
        lambda provisioned: _validate_and_attach(provisioned, template, publisher, waiter)
    )
