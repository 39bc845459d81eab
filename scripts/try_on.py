#!/usr/bin/env python3
"""
Try-On Command Line Client
Uploads a photo, creates a try-on job and polls it to completion.

Usage:
    python scripts/try_on.py photo.jpg --products p1 p2
    python scripts/try_on.py photo.jpg --products p1 --url http://localhost:8000 --interval 1
    python scripts/try_on.py --list --category jackets
"""

import argparse
import json
import logging
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import httpx

from tryon.client import JobTimeout, TryOnClient


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger("tryon.cli")


def main():
    parser = argparse.ArgumentParser(description="Run a virtual try-on against the API")
    parser.add_argument("photo", nargs="?", help="Path to the photo to upload")
    parser.add_argument("--products", "-p", nargs="+", default=[], help="Catalog product ids")
    parser.add_argument("--mode", choices=["image", "video"], default="image")
    parser.add_argument("--url", default="http://localhost:8000", help="API base URL")
    parser.add_argument("--session", help="Session id (X-Session-Id)")
    parser.add_argument("--interval", type=float, default=2.0, help="Polling interval in seconds")
    parser.add_argument("--timeout", type=float, default=60.0, help="Give up after this many seconds")
    parser.add_argument("--list", action="store_true", help="List catalog products and exit")
    parser.add_argument("--category", help="Category filter for --list")
    parser.add_argument("--gender", help="Gender filter for --list")
    parser.add_argument("--search", help="Text filter for --list")

    args = parser.parse_args()

    with TryOnClient(args.url, session_id=args.session) as client:
        try:
            if args.list:
                for item in client.list_products(category=args.category, gender=args.gender, search=args.search):
                    print(f"{item['id']:<12} {item['category']:<10} {item['price'] / 100:>8.2f} {item['currency']}  {item['title']}")
                sys.exit(0)

            if not args.photo or not args.products:
                parser.error("photo and --products are required")

            asset = client.upload_photo(args.photo)
            logger.info(f"Uploaded {asset['filename']} as {asset['assetId']} ({asset['size']} bytes)")

            job_id = client.create_job(asset["assetId"], args.products, mode=args.mode)
            logger.info(f"Created job {job_id} (session {client.session_id})")

            status = client.wait_for_job(job_id, interval=args.interval, timeout=args.timeout)
            if status["status"] != "succeeded":
                logger.error(f"Job {job_id} failed")
                sys.exit(1)

            print(json.dumps(client.get_result(job_id), indent=2))

        except JobTimeout as e:
            logger.error(str(e))
            sys.exit(2)
        except httpx.HTTPStatusError as e:
            logger.error(f"API error {e.response.status_code}: {e.response.text[:300]}")
            sys.exit(1)
        except httpx.HTTPError as e:
            logger.error(f"Cannot reach {args.url}: {e}")
            sys.exit(1)


if __name__ == "__main__":
    main()
