"""Codec exceptions."""


class FormatError(ValueError):
    """
    The whole input is structurally wrong and nothing can be salvaged.

    Raised for a JSON payload that is not a list of months, or a CSV
    file with no data rows. Individual bad CSV rows are never fatal;
    they are reported as RowIssue entries instead.
    """
    pass
