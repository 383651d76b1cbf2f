"""
Unit tests for domain models — validation and derived properties.

Test categories:
  - Domain names: normalization and syntax checks
  - DomainSet: ordering, primary/alternatives, rejection of bad input
  - Certificate views: coverage, readiness, validated count
  - Template fragments: change batch and ViewerCertificate block
"""

from __future__ import annotations

import dataclasses

import pytest

from cloudfront_certificate.domain.models import (
    DnsChange,
    DomainSet,
    ProvisioningContext,
    ViewerCertificate,
    is_valid_domain_name,
    normalize_domain,
)

from tests.factories import ARN, certificate, challenge, validation


class TestDomainNames:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("Example.COM.", "example.com"),
            ("www.example.com", "www.example.com"),
            ("  api.example.com  ", "api.example.com"),
        ],
    )
    def test_normalize(self, raw: str, expected: str) -> None:
        assert normalize_domain(raw) == expected

    @pytest.mark.parametrize(
        "name",
        ["example.com", "*.example.com", "a-b.example.co.uk", "xn--bcher-kva.example", "localhost"],
    )
    def test_valid_names(self, name: str) -> None:
        assert is_valid_domain_name(name)

    @pytest.mark.parametrize(
        "name",
        ["", ".", "-bad.example.com", "bad-.example.com", "exa mple.com", "a..com", "*", "www.*.com"],
    )
    def test_invalid_names(self, name: str) -> None:
        assert not is_valid_domain_name(name)

    def test_overlong_label_is_invalid(self) -> None:
        assert not is_valid_domain_name(f"{'a' * 64}.com")


class TestDomainSet:
    def test_first_name_is_primary(self) -> None:
        domains = DomainSet.of("example.com", ["www.example.com", "api.example.com"])

        assert domains.primary == "example.com"
        assert domains.alternative_names == ("www.example.com", "api.example.com")
        assert len(domains) == 3

    def test_no_alternative_names(self) -> None:
        domains = DomainSet.of("example.com")

        assert domains.alternative_names == ()
        assert len(domains) == 1

    def test_empty_set_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="at least one"):
            DomainSet(())

    def test_invalid_name_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="Invalid domain"):
            DomainSet(("example.com", "not a domain"))

    def test_duplicates_are_rejected(self) -> None:
        with pytest.raises(ValueError, match="Duplicate"):
            DomainSet(("example.com", "example.com"))

    def test_duplicates_differing_only_in_case_or_trailing_dot_are_rejected(self) -> None:
        with pytest.raises(ValueError, match="Duplicate"):
            DomainSet(("Example.com", "example.com."))


class TestCertificateDetail:
    def test_covers_subset_of_alternative_names(self) -> None:
        cert = certificate(domain="a.com", alternative_names=("b.com", "c.com"))

        assert cert.covers(("b.com",))
        assert cert.covers(())
        assert not cert.covers(("b.com", "d.com"))

    def test_ready_validations_need_pending_dns_and_record(self) -> None:
        cert = certificate(
            validations=(
                validation("a.com"),
                validation("b.com", with_record=False),
                validation("c.com", method="EMAIL"),
                validation("d.com", status="SUCCESS"),
            )
        )

        assert [v.domain_name for v in cert.ready_validations] == ["a.com"]
        assert cert.validated_count == 1
        assert [v.domain_name for v in cert.awaiting_challenges] == ["b.com", "c.com"]


class TestDnsChange:
    def test_change_batch_is_a_single_upsert(self) -> None:
        record = challenge("example.com")

        batch = DnsChange(zone_id="/hostedzone/Z1", record=record).to_change_batch()

        assert batch == {
            "Comment": "Record created by cloudfront-certificate",
            "Changes": [
                {
                    "Action": "UPSERT",
                    "ResourceRecordSet": {
                        "Name": record.name,
                        "Type": "CNAME",
                        "TTL": 60,
                        "ResourceRecords": [{"Value": record.value}],
                    },
                }
            ],
        }


class TestViewerCertificate:
    def test_block_without_protocol_version(self) -> None:
        assert ViewerCertificate(ARN).to_template() == {
            "AcmCertificateArn": ARN,
            "SslSupportMethod": "sni-only",
        }

    def test_block_with_protocol_version(self) -> None:
        block = ViewerCertificate(ARN, minimum_protocol_version="TLSv1.2_2021").to_template()

        assert block["MinimumProtocolVersion"] == "TLSv1.2_2021"


class TestProvisioningContext:
    def test_with_certificate_returns_a_copy(self) -> None:
        ctx = ProvisioningContext(domains=DomainSet.of("example.com"), distribution_resource="Cdn")

        updated = ctx.with_certificate(ARN)

        assert ctx.certificate_arn is None
        assert updated.require_certificate() == ARN
        assert updated.domains is ctx.domains

    def test_require_certificate_without_arn_raises(self) -> None:
        ctx = ProvisioningContext(domains=DomainSet.of("example.com"), distribution_resource="Cdn")

        with pytest.raises(ValueError):
            ctx.require_certificate()

    def test_context_is_immutable(self) -> None:
        ctx = ProvisioningContext(domains=DomainSet.of("example.com"), distribution_resource="Cdn")

        with pytest.raises(dataclasses.FrozenInstanceError):
            ctx.certificate_arn = ARN  # type: ignore[misc]
