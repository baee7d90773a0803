"""Unit tests for listing parsers."""

import pytest

from s3checker.parsers import ListingParseError, ListingStats, parse_cli_summary, parse_list_bucket_result


def test_parse_namespaced_listing(listing_xml):
    """Test a real-shaped ListBucketResult."""
    stats = parse_list_bucket_result(listing_xml)

    assert stats == ListingStats(object_count=3, total_size=3072)


def test_parse_listing_without_namespace():
    """Test a listing without the S3 namespace."""
    xml = (
        "<ListBucketResult>"
        "<Contents><Key>a</Key><Size>10</Size></Contents>"
        "<Contents><Key>b</Key><Size>5</Size></Contents>"
        "</ListBucketResult>"
    )

    assert parse_list_bucket_result(xml) == ListingStats(2, 15)


def test_parse_empty_listing():
    """Test an empty bucket is still a listing."""
    xml = '<ListBucketResult xmlns="http://s3.amazonaws.com/doc/2006-03-01/"><KeyCount>0</KeyCount></ListBucketResult>'

    assert parse_list_bucket_result(xml) == ListingStats(0, 0)


def test_bad_sizes_are_skipped():
    """Test missing and non-numeric sizes."""
    xml = (
        "<ListBucketResult>"
        "<Contents><Key>a</Key></Contents>"
        "<Contents><Key>b</Key><Size>lots</Size></Contents>"
        "<Contents><Key>c</Key><Size> 7 </Size></Contents>"
        "</ListBucketResult>"
    )

    assert parse_list_bucket_result(xml) == ListingStats(3, 7)


@pytest.mark.parametrize(
    "body",
    [
        "",
        "<html><body>hello</body></html>",
        "<Error><Code>AccessDenied</Code></Error>",
        "<ListBucketResult><Contents>",
        "not xml at all",
    ],
)
def test_non_listing_bodies_raise(body):
    """Test everything that is not a ListBucketResult."""
    with pytest.raises(ListingParseError):
        parse_list_bucket_result(body)


def test_parse_cli_summary():
    """Test aws s3 ls --summarize output."""
    output = (
        "2023-01-01 10:00:00       1024 backup.sql\n"
        "2023-01-02 11:00:00       2048 logo.png\n"
        "\n"
        "Total Objects: 2\n"
        "   Total Size: 3072\n"
    )

    assert parse_cli_summary(output) == ListingStats(2, 3072)


def test_parse_cli_summary_missing_lines():
    """Test output without a summary."""
    assert parse_cli_summary("2023-01-01 10:00:00 1024 backup.sql\n") is None
    assert parse_cli_summary("") is None
