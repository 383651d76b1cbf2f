"""
cloudfront_certificate — ACM certificates for CloudFront distributions.

Finds or requests an ACM certificate for a set of domains, publishes its
DNS validation records in Route 53, waits for issuance, and attaches the
certificate to the distribution in a CloudFormation template. Runs as a
build step of a deployment tool, just before the template is finalized.

Built on a small Railway-Oriented Programming layer (``railway``) so every
stage reports failure explicitly instead of raising.
"""

__version__ = "0.1.0"
