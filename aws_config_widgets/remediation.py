"""Manual remediation guidance for common AWS managed Config rules."""

from __future__ import annotations

from typing import Dict, Tuple

# Step-by-step guidance keyed by managed rule identifier. Rules without an
# entry fall back to :data:`GENERIC_REMEDIATION_STEPS`.
REMEDIATION_GUIDANCE: Dict[str, Tuple[str, ...]] = {
    "s3-bucket-public-read-prohibited": (
        "Remove public read access from the S3 bucket",
        "Update bucket policy to deny public read access",
        "Consider using bucket ACLs to restrict access",
        "Verify bucket is not used for public content hosting",
    ),
    "s3-bucket-public-write-prohibited": (
        "Remove public write access from the S3 bucket",
        "Update bucket policy to deny public write access",
        "Review bucket permissions and remove unnecessary public access",
        "Consider using IAM roles for controlled access",
    ),
    "iam-password-policy": (
        "Configure IAM password policy in AWS Console",
        "Set minimum password length (recommended: 12 characters)",
        "Enable password complexity requirements",
        "Set password expiration and prevent reuse",
    ),
    "root-account-mfa-enabled": (
        "Sign in as the root user and open Security credentials",
        "Assign a hardware or virtual MFA device to the root user",
        "Store the MFA device and recovery codes securely",
        "Re-evaluate the rule to confirm MFA is active",
    ),
    "iam-user-mfa-enabled": (
        "List IAM users without an assigned MFA device",
        "Require each user to register a virtual or hardware MFA device",
        "Attach a policy that denies actions when MFA is not present",
        "Consider replacing IAM users with IAM Identity Center access",
    ),
    "rds-instance-public-access-check": (
        "Modify RDS instance to disable public access",
        "Update security groups to restrict access",
        "Use VPC endpoints for private connectivity",
        "Consider using RDS Proxy for connection management",
    ),
    "vpc-sg-open-only-to-authorized-ports": (
        "Review security group rules and remove unnecessary open ports",
        "Restrict access to specific IP ranges where possible",
        "Use least privilege principle for port access",
        "Consider using security group references instead of 0.0.0.0/0",
    ),
}

GENERIC_REMEDIATION_STEPS: Tuple[str, ...] = (
    "Review the AWS Config rule documentation",
    "Identify the specific compliance requirements",
    "Manually fix the non-compliant resources",
    "Re-run the Config rule evaluation to verify compliance",
)


def remediation_steps(rule_name: str) -> Tuple[str, ...]:
    """Return remediation steps for *rule_name*.

    Lookups are case-insensitive. Unknown rules receive the generic steps.
    """

    return REMEDIATION_GUIDANCE.get(rule_name.strip().lower(), GENERIC_REMEDIATION_STEPS)


__all__ = ["GENERIC_REMEDIATION_STEPS", "REMEDIATION_GUIDANCE", "remediation_steps"]
