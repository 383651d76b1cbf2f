"""
Route 53 adapter — hosted-zone listing and validation-record upserts via boto3.

Implements the DnsService port. Pagination is exposed one page at a time
(Marker / IsTruncated / NextMarker) so the zone resolver owns the loop.
"""

from __future__ import annotations

from typing import Any

import structlog

from cloudfront_certificate.adapters.retry import retry_transient
from cloudfront_certificate.domain.models import DnsChange, HostedZone, HostedZonePage
from cloudfront_certificate.railway import ErrorCode
from cloudfront_certificate.railway.result import Result

log = structlog.get_logger()


class Route53DnsService:
    """Implements the DnsService port on a boto3 ``route53`` client."""

    def __init__(self, client: Any) -> None:
        self._client = client

    def list_hosted_zones(self, marker: str | None = None) -> Result[HostedZonePage]:
        return Result.from_computation(
            lambda: self._do_list(marker),
            ErrorCode.EXTERNAL_SERVICE_ERROR,
            "Listing hosted zones failed",
        )

    @retry_transient
    def _do_list(self, marker: str | None) -> HostedZonePage:
        kwargs = {"Marker": marker} if marker else {}
        response = self._client.list_hosted_zones(**kwargs)
        zones = tuple(
            HostedZone(
                id=zone["Id"],
                name=zone["Name"],
                private=bool(zone.get("Config", {}).get("PrivateZone", False)),
            )
            for zone in response.get("HostedZones", [])
        )
        return HostedZonePage(
            zones=zones,
            is_truncated=bool(response.get("IsTruncated", False)),
            next_marker=response.get("NextMarker"),
        )

    def upsert_record(self, change: DnsChange) -> Result[str]:
        return Result.from_computation(
            lambda: self._do_upsert(change),
            ErrorCode.EXTERNAL_SERVICE_ERROR,
            f"Upserting {change.record.name} in zone {change.zone_id} failed",
        )

    @retry_transient
    def _do_upsert(self, change: DnsChange) -> str:
        response = self._client.change_resource_record_sets(
            HostedZoneId=change.zone_id,
            ChangeBatch=change.to_change_batch(),
        )
        change_id: str = response["ChangeInfo"]["Id"]
        log.info(
            "route53.record_upserted",
            zone_id=change.zone_id,
            record=change.record.name,
            change_id=change_id,
        )
        return change_id
