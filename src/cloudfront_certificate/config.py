"""
Configuration — typed, validated settings for a certificate run.

Uses pydantic-settings to:
  - Load from environment variables and an optional .env file
  - Accept the host tool's ``custom.cfdDomain`` block (camelCase keys)
  - Validate domain names and budgets before any AWS call is made

Only AppSettings is a BaseSettings instance. Sub-settings are plain
BaseModel classes populated via env_nested_delimiter="__", so the env var
CERTIFICATE__DOMAIN_NAME maps to certificate.domain_name and AWS__REGION to
aws.region. List values (CERTIFICATE__ALTERNATIVE_NAMES) are given as JSON.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cloudfront_certificate.domain.models import (
    DomainSet,
    ProvisioningContext,
    is_valid_domain_name,
    normalize_domain,
)


def _check_domain(name: str) -> str:
    normalized = normalize_domain(name)
    if not is_valid_domain_name(normalized):
        raise ValueError(f"{name!r} is not a valid DNS name")
    return normalized


class CertificateSettings(BaseModel):
    """
    What certificate to provision and where to attach it.

    Field names double as snake_case env keys; the camelCase aliases match
    the host tool's configuration block:

        custom:
          cfdDomain:
            domainName: www.example.com
            alternativeNames: [example.com]
            cloudFrontResource: CloudFrontDistribution
            minimumProtocolVersion: TLSv1.2_2021
            retries: 31
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    domain_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("domain_name", "domainName"),
        description="Primary domain; unset means the run is skipped",
    )
    alternative_names: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices(
            "alternative_names", "alternativeNames", "subjectAlternativeNames"
        ),
    )
    distribution_resource: str = Field(
        default="CloudFrontDistribution",
        validation_alias=AliasChoices("distribution_resource", "cloudFrontResource"),
        min_length=1,
    )
    minimum_protocol_version: str | None = Field(
        default=None,
        validation_alias=AliasChoices("minimum_protocol_version", "minimumProtocolVersion"),
    )
    retries: int = Field(default=31, ge=1, description="Challenge readiness re-polls")
    issuance_attempts: int = Field(
        default=15,
        ge=1,
        validation_alias=AliasChoices("issuance_attempts", "issuanceAttempts"),
    )
    wait_for_issuance: bool = Field(
        default=True,
        validation_alias=AliasChoices("wait_for_issuance", "waitForIssuance"),
    )

    @field_validator("domain_name", mode="before")
    @classmethod
    def validate_domain_name(cls, value: Any) -> str | None:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        return _check_domain(str(value))

    @field_validator("alternative_names", mode="before")
    @classmethod
    def validate_alternative_names(cls, value: Any) -> list[str]:
        """Accept a list or a comma-separated string; normalize and de-duplicate."""
        if value is None:
            return []
        if isinstance(value, str):
            value = [part for part in value.split(",") if part.strip()]
        return list(dict.fromkeys(_check_domain(str(name)) for name in value))

    @field_validator("minimum_protocol_version", mode="before")
    @classmethod
    def blank_protocol_is_unset(cls, value: Any) -> str | None:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        return str(value).strip()

    @model_validator(mode="after")
    def drop_primary_from_alternatives(self) -> CertificateSettings:
        if self.domain_name is None:
            if self.alternative_names:
                raise ValueError("alternative names are configured but domainName is missing")
            return self
        if self.domain_name in self.alternative_names:
            self.alternative_names = [n for n in self.alternative_names if n != self.domain_name]
        return self

    @classmethod
    def from_host_config(cls, config: Mapping[str, Any] | None) -> CertificateSettings:
        """Build settings from the host tool's configuration block."""
        return cls.model_validate(dict(config or {}))

    def to_context(self) -> ProvisioningContext | None:
        """The request-scoped context for a run, or None when no domain is set."""
        if self.domain_name is None:
            return None
        return ProvisioningContext(
            domains=DomainSet.of(self.domain_name, self.alternative_names),
            distribution_resource=self.distribution_resource,
            minimum_protocol_version=self.minimum_protocol_version,
            validation_retries=self.retries,
            issuance_attempts=self.issuance_attempts,
            wait_for_issuance=self.wait_for_issuance,
        )


class AwsSettings(BaseModel):
    """
    AWS session configuration.

    CloudFront only accepts ACM certificates from us-east-1, hence the default.
    Credentials come from the standard boto3 chain or from a session the
    host tool hands in.
    """

    region: str = Field(default="us-east-1")
    profile: str | None = Field(default=None)
    max_attempts: int = Field(default=5, ge=1, description="botocore transport retries")


class AppSettings(BaseSettings):
    """
    Root settings — aggregates all sub-settings.

    Load order (highest priority first):
      1. Keyword arguments (the host tool's configuration)
      2. Environment variables
      3. .env file
      4. Default values
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    certificate: CertificateSettings = Field(default_factory=CertificateSettings)
    aws: AwsSettings = Field(default_factory=AwsSettings)
    log_level: str = Field(default="INFO")
