"""
Host-tool binding — the entry point the deployment framework calls.

The framework runs ``assign_certificate`` at its pre-finalization hook,
after the CloudFormation template is compiled and before it is written out.
A failed run raises CertificateProvisioningError so the host fails the
deployment; skipped and successful runs return a RunReport.

    hooks = hooks_for(template, custom["cfdDomain"], log_sink=serverless.cli.log)
    hooks[FINALIZE_HOOK]()
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from functools import partial
from typing import Any

from cloudfront_certificate.config import AppSettings, CertificateSettings
from cloudfront_certificate.domain.models import RunReport
from cloudfront_certificate.main import configure_structlog, create_pipeline
from cloudfront_certificate.railway import FailureDescription, LoggingExecutionContext

FINALIZE_HOOK = "aws:package:finalize:mergeCustomProviderResources"


class CertificateProvisioningError(RuntimeError):
    """A certificate run failed; ``failure`` says how."""

    def __init__(self, failure: FailureDescription) -> None:
        super().__init__(str(failure))
        self.failure = failure


def load_settings(host_config: Mapping[str, Any] | None = None) -> AppSettings:
    """
    Settings from the environment, overridden by the host's configuration block.

    An absent block leaves the certificate section to the environment.
    """
    if host_config is None:
        return AppSettings()
    return AppSettings(certificate=CertificateSettings.from_host_config(host_config))


def assign_certificate(
    template: dict[str, Any],
    host_config: Mapping[str, Any] | None = None,
    log_sink: Callable[[str], Any] | None = None,
    session: Any | None = None,
    settings: AppSettings | None = None,
) -> RunReport:
    """
    Provision, validate and attach the certificate for ``template``.

    ``session`` is the boto3 session carrying the host's resolved
    credentials; without it the default credential chain is used.
    """
    settings = settings or load_settings(host_config)
    configure_structlog(settings.log_level, sink=log_sink)

    pipeline_fn = create_pipeline(settings, template, session)
    result = LoggingExecutionContext(operation="CloudFrontCertificate").execute(pipeline_fn)
    if result.is_failure():
        raise CertificateProvisioningError(result.error())
    return result.value()


def hooks_for(
    template: dict[str, Any],
    host_config: Mapping[str, Any] | None = None,
    log_sink: Callable[[str], Any] | None = None,
    session: Any | None = None,
) -> dict[str, Callable[[], RunReport]]:
    """Lifecycle hook table for the host tool: one zero-argument entry per event."""
    return {
        FINALIZE_HOOK: partial(
            assign_certificate,
            template,
            host_config=host_config,
            log_sink=log_sink,
            session=session,
        )
    }
