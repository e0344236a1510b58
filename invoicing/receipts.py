"""Public URLs for stored receipt images."""

from urllib.parse import quote

RECEIPT_URL_TEMPLATE = "https://{bucket}.s3.{region}.amazonaws.com/{key}"


def receipt_url(receipt_id: str, bucket: str, region: str) -> str:
    """
    Build the public-read URL of a receipt.

    No existence check: a deleted key still yields a URL that 404s on fetch.
    Callers skip this for invoices without a receipt.

    Raises:
        ValueError: If receipt_id is empty
    """
    if not receipt_id:
        raise ValueError("receipt_id is required to build a receipt URL")
    return RECEIPT_URL_TEMPLATE.format(bucket=bucket, region=region, key=quote(receipt_id))
