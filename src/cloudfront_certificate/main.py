"""
Composition root — builds the adapters and wires the pipeline.

This is the ONLY place where concrete classes are instantiated. Stages
depend on the CertificateAuthority and DnsService protocols; here they get
boto3-backed implementations.

Responsibilities:
  1. Configure structlog (stdout, or the host tool's log sink)
  2. Create the boto3 clients from AwsSettings or a host-provided session
  3. Create the adapters and stages
  4. Bind everything into a zero-argument pipeline callable
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import partial
from typing import Any, TypeAlias

import boto3
import structlog
from botocore.config import Config

from cloudfront_certificate.adapters.acm import AcmCertificateAuthority
from cloudfront_certificate.adapters.route53 import Route53DnsService
from cloudfront_certificate.config import AppSettings
from cloudfront_certificate.domain.models import RunReport
from cloudfront_certificate.issuance import IssuanceWaiter
from cloudfront_certificate.pipeline import run_pipeline
from cloudfront_certificate.provisioner import CertificateProvisioner
from cloudfront_certificate.railway.result import Result
from cloudfront_certificate.validation import ValidationRecordPublisher
from cloudfront_certificate.zones import ZoneResolver


class SinkLogger:
    """structlog logger that hands each rendered line to a plain-string sink."""

    def __init__(self, sink: Callable[[str], Any]) -> None:
        self._sink = sink

    def msg(self, message: str) -> None:
        self._sink(message)

    log = debug = info = warning = warn = error = critical = exception = fatal = msg


def configure_structlog(
    log_level: str = "INFO",
    sink: Callable[[str], Any] | None = None,
) -> None:
    """
    Configure structlog for human-readable console logging.

    With a ``sink`` (the host tool's ``cli.log``), rendered lines go there
    without colors instead of to stdout.
    """
    logger_factory: Any = (
        (lambda *args: SinkLogger(sink)) if sink is not None else structlog.PrintLoggerFactory()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=sink is None),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=logger_factory,
        cache_logger_on_first_use=False,
    )


_Stages: TypeAlias = tuple[CertificateProvisioner, ValidationRecordPublisher, IssuanceWaiter]


def create_clients(settings: AppSettings, session: Any | None = None) -> tuple[Any, Any]:
    """Create the ACM and Route 53 clients. Route 53 is global; ACM is regional."""
    session = session or boto3.Session(
        region_name=settings.aws.region,
        profile_name=settings.aws.profile,
    )
    client_config = Config(retries={"max_attempts": settings.aws.max_attempts, "mode": "standard"})
    acm = session.client("acm", region_name=settings.aws.region, config=client_config)
    route53 = session.client("route53", config=client_config)
    return acm, route53


def create_stages(acm_client: Any, route53_client: Any) -> _Stages:
    """Instantiate the adapters and the three network-facing stages."""
    authority = AcmCertificateAuthority(acm_client)
    dns = Route53DnsService(route53_client)
    provisioner = CertificateProvisioner(authority)
    publisher = ValidationRecordPublisher(authority, dns, resolver=ZoneResolver(dns))
    waiter = IssuanceWaiter(authority)
    return provisioner, publisher, waiter


def create_pipeline(
    settings: AppSettings,
    template: dict[str, Any],
    session: Any | None = None,
) -> Callable[[], Result[RunReport]]:
    """
    Wire the pipeline for one deployment template.

    The returned callable takes no arguments; the host decides when to run it.
    Creating the clients makes no AWS call, so an unconfigured run stays a
    no-op even without credentials.
    """
    provisioner, publisher, waiter = create_stages(*create_clients(settings, session))
    return partial(
        run_pipeline,
        context=settings.certificate.to_context(),
        template=template,
        provisioner=provisioner,
        publisher=publisher,
        waiter=waiter,
    )
