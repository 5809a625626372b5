#!/usr/bin/env python3
"""
Script: sign_request.py
Description: Print the signature header for a request body.

Subscription management requests must be signed with the same shared
secret as event notifications. Use the output as a curl header.

Usage:
    python scripts/sign_request.py '{"url": "https://example.com/hook"}'
    python scripts/sign_request.py ''   # GET and DELETE requests have an empty body
"""

import argparse
import sys

from webhook_relay.auth.signature import SIGNATURE_HEADER, SIGNATURE_VERSION, compute_signature
from webhook_relay.config.settings import settings


def main():
    """Main script execution."""
    parser = argparse.ArgumentParser(description="Sign a webhook relay request body")
    parser.add_argument('body', help='Exact request body to sign')
    parser.add_argument(
        '--secret',
        type=str,
        default=settings.signing_secret,
        help='Signing secret (default: SIGNING_SECRET)'
    )

    args = parser.parse_args()

    if not args.secret:
        print("ERROR: no signing secret; set SIGNING_SECRET or pass --secret.")
        sys.exit(1)

    signature = compute_signature(args.body.encode('utf-8'), args.secret)
    print(f"{SIGNATURE_HEADER}: {SIGNATURE_VERSION}={signature}")


if __name__ == "__main__":
    main()
