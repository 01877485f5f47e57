"""Fatal errors that stop the report before anything is printed."""


class CostReportError(Exception):
    """Base error. ``main`` turns it into exit code 1."""


class EnvironmentCheckError(CostReportError):
    """boto3 is missing or the AWS credentials are unusable."""


class CostFetchError(CostReportError):
    """The Cost Explorer query failed."""
