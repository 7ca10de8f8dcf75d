"""Run one time to live sweep over the configured results cache.

Meant to be called from cron or another scheduler, e.g.

    results-cache-sweep --ttl-seconds 3600
"""
import argparse
import logging
import sys

from resultscache.blobstore import BlobStoreError
from resultscache.config import load_settings
from resultscache.exceptions import ResultsCacheError
from resultscache.factory import create_results_cache

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    settings = load_settings()

    parser = argparse.ArgumentParser(description="Remove expired results from the results cache")
    parser.add_argument("--ttl-seconds", type=float, default=settings.ttl_seconds,
                        help=f"How long results live past their marker (default: {settings.ttl_seconds})")
    parser.add_argument("--database-url", default=settings.database_url,
                        help="SQLAlchemy URL of the blob store")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every removed result")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = settings.model_copy(update={"database_url": args.database_url, "ttl_seconds": args.ttl_seconds})
    try:
        with create_results_cache(settings) as cache:
            cache.process_time_to_live(settings.ttl_seconds)
    except (ResultsCacheError, BlobStoreError) as e:
        logger.error(f"Time to live processing failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
