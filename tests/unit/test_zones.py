"""
Unit tests for zone resolution — longest label-aligned suffix over a paginated listing.

Test categories:
  - Matching: label alignment, most specific zone wins, degenerate single label
  - Listing: every page is followed, private zones ignored
  - Failures: no owning zone, listing errors, truncated page without marker
"""

from __future__ import annotations

from unittest.mock import MagicMock

from cloudfront_certificate.domain.models import HostedZonePage
from cloudfront_certificate.railway import ErrorCode, Result, ResultAssertions
from cloudfront_certificate.zones import ZoneResolver, select_zone, zone_owns

from tests.factories import single_page, zone


class TestSelectZone:
    """Pure selection over an in-memory list of zones."""

    def test_most_specific_zone_wins(self) -> None:
        """
        GIVEN zones com., example.com. and dev.example.com.
        WHEN api.dev.example.com is resolved
        THEN dev.example.com. is selected.
        """
        zones = [zone("com."), zone("example.com."), zone("dev.example.com.")]

        selected = select_zone("api.dev.example.com", zones)

        assert selected is not None
        assert selected.normalized_name == "dev.example.com"

    def test_listing_order_does_not_matter(self) -> None:
        zones = [zone("dev.example.com."), zone("com."), zone("example.com.")]

        selected = select_zone("api.dev.example.com", zones)

        assert selected is not None
        assert selected.name == "dev.example.com."

    def test_unrelated_domain_has_no_zone(self) -> None:
        """
        GIVEN only example.com.
        WHEN foo.org is resolved
        THEN nothing is selected.
        """
        assert select_zone("foo.org", [zone("example.com.")]) is None

    def test_string_suffix_is_not_enough(self) -> None:
        """
        GIVEN zone ample.com.
        WHEN www.example.com is resolved
        THEN ample.com. is not a match (labels must align).
        """
        assert select_zone("www.example.com", [zone("ample.com.")]) is None

    def test_zone_deeper_than_domain_is_rejected(self) -> None:
        assert not zone_owns(zone("dev.example.com."), "example.com")

    def test_apex_domain_matches_its_own_zone(self) -> None:
        assert zone_owns(zone("example.com."), "example.com")

    def test_trailing_dot_on_domain_is_ignored(self) -> None:
        """
        GIVEN a challenge record name with a trailing dot
        WHEN it is resolved
        THEN matching behaves as for the undotted name.
        """
        selected = select_zone("_abc.example.com.", [zone("example.com.")])

        assert selected is not None
        assert selected.name == "example.com."

    def test_single_label_domain_matches_any_zone(self) -> None:
        assert zone_owns(zone("example.com."), "localhost")

    def test_comparison_is_case_insensitive(self) -> None:
        assert zone_owns(zone("Example.COM."), "www.example.com")


class TestZoneResolverListing:
    """Pagination of ListHostedZones."""

    def test_follows_every_page(self, dns: MagicMock) -> None:
        """
        GIVEN the owning zone sits on the second page
        WHEN resolve is called
        THEN both pages are fetched and the zone is found.
        """
        dns.list_hosted_zones.side_effect = [
            Result.success(
                HostedZonePage(zones=(zone("other.net."),), is_truncated=True, next_marker="Z2")
            ),
            single_page(zone("example.com.", zone_id="/hostedzone/ZEXAMPLE")),
        ]
        resolver = ZoneResolver(dns)

        result = resolver.resolve("_x.www.example.com.")

        found = ResultAssertions.assert_success(result)
        assert found.id == "/hostedzone/ZEXAMPLE"
        assert [c.args for c in dns.list_hosted_zones.call_args_list] == [(None,), ("Z2",)]

    def test_list_zones_collects_all_pages(self, dns: MagicMock) -> None:
        dns.list_hosted_zones.side_effect = [
            Result.success(HostedZonePage(zones=(zone("a.com."),), is_truncated=True, next_marker="m1")),
            Result.success(HostedZonePage(zones=(zone("b.com."),), is_truncated=True, next_marker="m2")),
            single_page(zone("c.com.")),
        ]

        zones = ResultAssertions.assert_success(ZoneResolver(dns).list_zones())

        assert [z.name for z in zones] == ["a.com.", "b.com.", "c.com."]

    def test_private_zones_are_ignored(self, dns: MagicMock) -> None:
        """
        GIVEN a private dev.example.com. and a public example.com.
        WHEN a dev.example.com challenge is resolved
        THEN the public parent zone is used.
        """
        dns.list_hosted_zones.return_value = single_page(
            zone("dev.example.com.", private=True),
            zone("example.com.", zone_id="/hostedzone/ZPUBLIC"),
        )

        found = ResultAssertions.assert_success(
            ZoneResolver(dns).resolve("_x.dev.example.com.")
        )

        assert found.id == "/hostedzone/ZPUBLIC"

    def test_resolve_with_prefetched_zones_skips_listing(self, dns: MagicMock) -> None:
        resolver = ZoneResolver(dns)

        result = resolver.resolve("www.example.com", [zone("example.com.")])

        ResultAssertions.assert_success(result)
        dns.list_hosted_zones.assert_not_called()


class TestZoneResolverFailures:
    def test_no_owning_zone_is_zone_not_found(self, dns: MagicMock) -> None:
        dns.list_hosted_zones.return_value = single_page(zone("example.com."))

        result = ZoneResolver(dns).resolve("foo.org")

        ResultAssertions.assert_failure(result, ErrorCode.ZONE_NOT_FOUND)
        ResultAssertions.assert_failure_message_contains(result, "foo.org")

    def test_listing_failure_propagates(self, dns: MagicMock) -> None:
        dns.list_hosted_zones.return_value = Result.failure(
            ErrorCode.EXTERNAL_SERVICE_ERROR, "AccessDenied"
        )

        result = ZoneResolver(dns).resolve("www.example.com")

        ResultAssertions.assert_failure(result, ErrorCode.EXTERNAL_SERVICE_ERROR)

    def test_truncated_page_without_marker_fails(self, dns: MagicMock) -> None:
        """
        GIVEN a page flagged truncated but with no NextMarker
        WHEN zones are listed
        THEN the listing fails instead of looping forever.
        """
        dns.list_hosted_zones.return_value = Result.success(
            HostedZonePage(zones=(zone("example.com."),), is_truncated=True, next_marker=None)
        )

        result = ZoneResolver(dns).list_zones()

        ResultAssertions.assert_failure(result, ErrorCode.EXTERNAL_SERVICE_ERROR)
        assert dns.list_hosted_zones.call_count == 1
