"""
Zone resolution — map a DNS name to the most specific hosted zone that owns it.

Matching is label-aligned: ``dev.example.com`` owns ``api.dev.example.com``
but ``ample.com`` owns nothing under ``example.com``. Among all owning zones
the one with the longest name wins. When two candidates have names of the
same length the choice is unspecified; Route 53 does not guarantee a stable
listing order.
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from cloudfront_certificate.domain.models import HostedZone, normalize_domain
from cloudfront_certificate.domain.ports import DnsService
from cloudfront_certificate.railway import ErrorCode
from cloudfront_certificate.railway.result import Result

log = structlog.get_logger()


def _reversed_labels(name: str) -> list[str]:
    return normalize_domain(name).split(".")[::-1]


def zone_owns(zone: HostedZone, domain: str) -> bool:
    """
    True when ``zone`` is a label-aligned suffix of ``domain``.

    A single-label domain matches every zone.
    """
    domain_labels = _reversed_labels(domain)
    zone_labels = _reversed_labels(zone.name)
    if len(domain_labels) == 1:
        return True
    if len(domain_labels) < len(zone_labels):
        return False
    return all(z == d for z, d in zip(zone_labels, domain_labels))


def select_zone(domain: str, zones: Iterable[HostedZone]) -> HostedZone | None:
    """Pick the longest-named zone that owns ``domain``, or None."""
    candidates = [zone for zone in zones if zone_owns(zone, domain)]
    return max(candidates, key=lambda zone: len(zone.normalized_name), default=None)


class ZoneResolver:
    """
    Resolve challenge record names to public hosted zones.

    ``list_zones`` walks every page of the listing. ``resolve`` accepts a
    listing fetched earlier in the same pass so that several records can be
    resolved against one snapshot; listings are never kept between runs.
    """

    def __init__(self, dns: DnsService) -> None:
        self._dns = dns

    def list_zones(self) -> Result[list[HostedZone]]:
        zones: list[HostedZone] = []
        marker: str | None = None
        while True:
            page_result = self._dns.list_hosted_zones(marker)
            if page_result.is_failure():
                return Result.failure_from(page_result.error())
            page = page_result.value()
            zones.extend(page.zones)
            if not page.is_truncated:
                break
            if not page.next_marker:
                return Result.failure(
                    ErrorCode.EXTERNAL_SERVICE_ERROR,
                    "Hosted zone listing is truncated but carries no NextMarker",
                )
            marker = page.next_marker

        log.debug("zones.listed", count=len(zones))
        return Result.success(zones)

    def resolve(
        self,
        domain: str,
        zones: list[HostedZone] | None = None,
    ) -> Result[HostedZone]:
        if zones is None:
            return self.list_zones().flat_map(lambda listed: self.resolve(domain, listed))

        zone = select_zone(domain, (z for z in zones if not z.private))
        if zone is not None:
            log.debug("zones.resolved", domain=domain, zone_id=zone.id, zone=zone.name)
        return Result.from_optional(
            zone,
            f"No hosted zone found for {normalize_domain(domain)}",
            ErrorCode.ZONE_NOT_FOUND,
        )
