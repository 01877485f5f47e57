"""AWS access: session setup, credential check, Cost Explorer and Organizations.

Run the CLI with --dry-run to use SAMPLE_DATA instead of calling AWS.
"""
from __future__ import annotations

import datetime
import logging
from typing import List, Optional, Tuple

try:
    import boto3
    from botocore.exceptions import BotoCoreError, ClientError
except ImportError:
    boto3 = None

from account_cost_trends.errors import CostFetchError, EnvironmentCheckError
from account_cost_trends.models import CostData

LOG = logging.getLogger(__name__)

# Cost Explorer is a global service served from us-east-1
CE_REGION = "us-east-1"

SAMPLE_DATA = {
    "accounts": {
        "111111111111": "production",
        "222222222222": "staging",
        "333333333333": "shared-services",
    },
    # daily amounts, cycled over the requested window
    "costs": {
        "111111111111": ["812.40", "830.15", "1104.92", "1098.37", "760.02"],
        "222222222222": ["54.10", "71.88", "70.95", "18.30", "55.12"],
        "333333333333": ["0", "12.75", "13.02", "13.02", "29.64"],
    },
}


def get_boto_session(profile=None):
    """Return a boto3.Session using an optional profile."""
    if boto3 is None:
        raise EnvironmentCheckError("boto3 is required but not installed")
    if profile:
        try:
            return boto3.Session(profile_name=profile)
        except BotoCoreError as e:
            LOG.warning("Could not load profile '%s' (%s). Falling back to default credentials.", profile, e)
    return boto3.Session()


def check_credentials(session) -> str:
    """Return the caller's account id, or raise if the credentials do not work."""
    try:
        resp = session.client("sts").get_caller_identity()
    except (BotoCoreError, ClientError) as e:
        raise EnvironmentCheckError(f"AWS credentials are not properly configured: {e}") from e
    account = resp.get("Account")
    LOG.debug("Authenticated as account %s (%s)", account, resp.get("Arn"))
    return account


class CostExplorerSource:
    """Daily unblended cost per linked account from Cost Explorer."""

    def __init__(self, session):
        self.ce = session.client("ce", region_name=CE_REGION)

    def fetch(self, start: str, end: str) -> CostData:
        LOG.debug("Querying Cost Explorer for %s to %s", start, end)
        try:
            resp = self.ce.get_cost_and_usage(
                TimePeriod={"Start": start, "End": end},
                Granularity="DAILY",
                Metrics=["UnblendedCost"],
                GroupBy=[{"Type": "DIMENSION", "Key": "LINKED_ACCOUNT"}],
            )
        except (BotoCoreError, ClientError) as e:
            raise CostFetchError(f"Failed to fetch cost data from AWS: {e}") from e
        return parse_cost_response(resp)


def parse_cost_response(resp) -> CostData:
    dates = set()
    records: List[Tuple[str, str, str]] = []
    for r in resp.get("ResultsByTime", []):
        date = r.get("TimePeriod", {}).get("Start")
        if not date:
            continue
        dates.add(date)
        for g in r.get("Groups", []):
            account = g.get("Keys", ["Unknown"])[0]
            amount = g.get("Metrics", {}).get("UnblendedCost", {}).get("Amount")
            records.append((date, account, amount))
    return CostData(dates=sorted(dates), records=records)


class OrganizationsNameLookup:
    """Account names from AWS Organizations. Needs access to the management account."""

    def __init__(self, session):
        self.client = session.client("organizations")

    def lookup(self, account_id: str) -> Optional[str]:
        try:
            resp = self.client.describe_account(AccountId=account_id)
        except (BotoCoreError, ClientError) as e:
            LOG.debug("describe_account failed for %s: %s", account_id, e)
            return None
        return resp.get("Account", {}).get("Name") or None


class SampleCostSource:
    def fetch(self, start: str, end: str) -> CostData:
        first = datetime.date.fromisoformat(start)
        last = datetime.date.fromisoformat(end)
        dates = [(first + datetime.timedelta(days=i)).isoformat() for i in range((last - first).days)]
        records = []
        for i, date in enumerate(dates):
            for account, amounts in SAMPLE_DATA["costs"].items():
                records.append((date, account, amounts[i % len(amounts)]))
        return CostData(dates=dates, records=records)


class SampleNameLookup:
    def lookup(self, account_id: str) -> Optional[str]:
        return SAMPLE_DATA["accounts"].get(account_id)
