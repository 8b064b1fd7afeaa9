# main.py
import logging
import sys

from asf_rest.cache import CachingResource
from asf_rest.config import settings
from asf_rest.connectors.salesforce import create_rest_adapter
from asf_rest.errors import AsfRestError
from asf_rest.logging import setup_logging
from asf_rest.models import SObject

# Read the config and set the log level
setup_logging(script_name="asf_rest_demo")

logger = logging.getLogger(__name__)


class Account(SObject):
    pass


def main(query: str = "SELECT+Id,Name+FROM+Account+LIMIT+5") -> None:
    """Describe Account and run a SOQL query through the cache."""
    logger.info(f"Starting REST adapter demo in {settings.ASF_ENVIRONMENT} mode.")

    adapter = create_rest_adapter()
    accounts = CachingResource(Account.resource(adapter))

    version = accounts.get_version()
    logger.info(f"Available API versions (HTTP {version.status_code}): {version.body}")

    try:
        describe = accounts.get_detail_info()
        logger.info(f"Account describe is {len(describe)} bytes")
    except AsfRestError as e:
        logger.error(f"Describe failed: {e}")

    # Second call is served from the cache
    for _ in range(2):
        result = accounts.run_soql(query)
        if not result.ok:
            logger.error(f"Query failed with HTTP {result.status_code}: {result.body}")
            break
        records = result.json().get("records", [])
        logger.info(f"Query returned {len(records)} records")

    logger.info("Demo finished.")


if __name__ == "__main__":
    try:
        main(*sys.argv[1:2])
    except Exception as e:
        logger.critical(f"Unhandled exception in main: {e}", exc_info=True)
        sys.exit(1)
