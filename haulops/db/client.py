"""
Supabase client factory.

The dashboard talks to a single Supabase project with the publishable key.
Session handling is left to Supabase Auth on the client side; this backend
only needs a configured client to forward table, RPC and metadata calls.
"""

import logging

from haulops.config import settings
from supabase import Client, create_client

logger = logging.getLogger(__name__)


def get_supabase_client() -> Client:
    """
    Create a Supabase client for the configured project.

    Returns:
        A Supabase client built from SUPABASE_URL and SUPABASE_PUBLISHABLE_KEY.

    Raises:
        ValueError: If SUPABASE_URL is not configured.

    Example:
        >>> client = get_supabase_client()
        >>> result = client.table("trucks").select("*").execute()
    """
    if not settings.SUPABASE_URL:
        raise ValueError(
            "SUPABASE_URL is not configured. "
            "Cannot create a Supabase client."
        )

    client: Client = create_client(
        supabase_url=settings.SUPABASE_URL,
        supabase_key=settings.SUPABASE_PUBLISHABLE_KEY
    )

    logger.debug("Created Supabase client for %s", settings.SUPABASE_URL)

    return client
