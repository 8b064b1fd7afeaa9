"""
Utilities for connecting to the Salesforce API.

This module uses simple-salesforce to obtain a session id and pulls
credentials from the global settings object, then builds the
`RestAdapter` the rest of the application receives.
"""

import logging
from functools import lru_cache

from simple_salesforce import SalesforceLogin

from ..adapter import RestAdapter, configure
from ..config import settings
from ..errors import AdapterNotConfiguredError

logger = logging.getLogger(__name__)


@lru_cache
def get_salesforce_session() -> tuple[str, str]:
    """
    Returns the session id and instance host to authenticate with.

    Uses SALESFORCE.ACCESS_TOKEN and SALESFORCE.INSTANCE when both are set,
    otherwise logs in with username, password and security token.

    Returns:
        A ``(session_id, instance)`` tuple, e.g.
        ``("00D...", "na7.salesforce.com")``.

    Raises:
        AdapterNotConfiguredError: If neither a session nor login
            credentials are configured.
    """
    sf_settings = settings.SALESFORCE
    if sf_settings.ACCESS_TOKEN and sf_settings.INSTANCE:
        logger.info(f"Using configured Salesforce session for {sf_settings.INSTANCE}")
        return sf_settings.ACCESS_TOKEN, sf_settings.INSTANCE

    if not (sf_settings.USERNAME and sf_settings.PASSWORD):
        logger.critical("No Salesforce session or login credentials configured")
        raise AdapterNotConfiguredError(
            "Set SALESFORCE__ACCESS_TOKEN and SALESFORCE__INSTANCE, "
            "or SALESFORCE__USERNAME and SALESFORCE__PASSWORD"
        )

    try:
        session_id, instance = SalesforceLogin(
            username=sf_settings.USERNAME,
            password=sf_settings.PASSWORD,
            security_token=sf_settings.SECURITY_TOKEN,
            domain=sf_settings.DOMAIN,
        )
    except Exception as e:
        logger.critical(f"Failed to log in to Salesforce: {e}")
        raise

    logger.info(f"Salesforce login succeeded for {sf_settings.USERNAME} on {instance}")
    return session_id, instance


@lru_cache
def create_rest_adapter() -> RestAdapter:
    """
    Creates and returns the REST adapter for the configured org.

    Cached, so the application configures the adapter once and every
    caller shares it.
    """
    session_id, instance = get_salesforce_session()
    config = configure(
        session_id,
        instance,
        settings.SALESFORCE.API_VERSION,
        timeout=settings.SALESFORCE.TIMEOUT,
    )
    return RestAdapter(config)
