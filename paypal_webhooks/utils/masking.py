"""Utility functions for masking sensitive data in logs and outputs."""


def truncate_for_log(value: str, visible: int = 12) -> str:
    """
    Shorten a long opaque value (signature, PEM) for safe logging.

    Args:
        value: Value to shorten
        visible: Number of leading characters to keep

    Returns:
        The value itself when short, otherwise its prefix plus the original length

    Examples:
        >>> truncate_for_log("abc")
        'abc'
        >>> truncate_for_log("De1vvm+9LQDFQgKZ7leyYaVaAbku", visible=6)
        'De1vvm...(28 chars)'
    """
    if len(value) <= visible:
        return value
    return f"{value[:visible]}...({len(value)} chars)"
