#!/usr/bin/env python3
"""
Basic usage examples for the VWS client library.

Walks through the same steps as the target manager demo: connect to the
database, list its targets, then optionally create, inspect and delete a
target from an image file.

Usage:
    VWS_ACCESS_KEY=... VWS_SECRET_KEY=... python example_usage.py [image.jpg]
"""

import logging
import sys

from vws_client import VWSClient, VWSClientError
from vws_client.imaging import encode_jpeg
from vws_client.log import setup_logging


def log_result(label, response, describe=None):
    """Print a response the way the demo log panel shows it."""
    if response.is_success:
        print(f"   ✓ {label}")
        if describe:
            print("   " + describe().replace("\n", "\n   "))
    else:
        print(f"   ✗ {label}: {response.result_code}")
    print()


def main():
    """Run basic usage examples."""
    setup_logging(logging.INFO)

    print("=== VWS Python Client Basic Usage Examples ===\n")

    try:
        client = VWSClient.from_env()
    except VWSClientError as e:
        print(f"Configuration error: {e}")
        return 1

    with client:
        print("1. Requesting database summary...")
        summary = client.retrieve_database_summary().result()
        log_result("Database summary", summary, summary.describe)
        if not summary.is_success:
            return 1

        print("2. Requesting target list...")
        targets = client.retrieve_target_list().result()
        log_result("Target list", targets)
        for target_id in targets.results or []:
            print(f"   - {target_id}")
        print()

        if len(sys.argv) < 2:
            print("Pass an image path to try create/retrieve/delete.")
            return 0

        print("3. Creating new target...")
        image = encode_jpeg(sys.argv[1])
        created = client.create_target("example-target", 0.1, image, True, "hello from python").result()
        log_result(f"New Target ID: {created.target_id}", created)
        if not created.is_success:
            return 1

        print("4. Requesting target record and summary concurrently...")
        record_call = client.retrieve_target(created.target_id)
        summary_call = client.retrieve_target_summary(created.target_id)

        record = record_call.result()
        log_result("Target record", record, record.target_record.describe if record.target_record else None)
        target_summary = summary_call.result()
        log_result("Target summary", target_summary, target_summary.describe)

        print("5. Updating metadata...")
        updated = client.update_target_metadata(created.target_id, "updated metadata").result()
        log_result("Metadata updated", updated)

        print("6. Deleting target...")
        deleted = client.delete_target(created.target_id).result()
        log_result("Target deleted", deleted)

    print("=== Examples completed ===")
    return 0


if __name__ == "__main__":
    sys.exit(main())
