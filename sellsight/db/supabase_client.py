"""
Supabase client for database operations.
Provides a singleton instance for accessing Supabase services.
"""
from supabase import create_client, Client
import logging
import socket
from urllib.parse import urlparse
import time
from sellsight.config import settings

logger = logging.getLogger(__name__)


class SupabaseClientManager:
    """
    Manager for Supabase client with singleton pattern.
    """
    _instance = None

    def __init__(self, url=None, key=None, max_retries: int = 2):
        url = url or settings.SUPABASE_URL
        key = key or settings.SUPABASE_KEY
        self.client = None
        self.enabled = False

        if not url or not key:
            logger.error("SUPABASE_URL and SUPABASE_KEY must be set when DATA_SOURCE is 'supabase'")
            return

        # Check DNS resolution first to provide a better error message
        hostname = urlparse(url).netloc
        try:
            socket.gethostbyname(hostname)
        except socket.gaierror as dns_error:
            logger.error(f"DNS resolution failed for Supabase URL ({hostname}): {dns_error}")
            return

        last_error = None
        for attempt in range(1, max_retries + 1):
            try:
                self.client = create_client(url, key)
                self.enabled = True
                logger.info("Successfully initialized Supabase client")
                return
            except Exception as retry_error:
                last_error = retry_error
                if attempt < max_retries:
                    logger.warning(f"Supabase client creation failed (attempt {attempt}), retrying...")
                    time.sleep(1)

        logger.error(f"Failed to initialize Supabase client: {last_error}")

    @classmethod
    def get_instance(cls) -> 'SupabaseClientManager':
        """Get the singleton instance of SupabaseClientManager"""
        if cls._instance is None:
            cls._instance = SupabaseClientManager()
        return cls._instance

    @classmethod
    def reset(cls):
        cls._instance = None

    def get_client(self) -> Client:
        """Get the Supabase client instance"""
        if not self.enabled or self.client is None:
            raise ValueError("Supabase client is not initialized or connection failed")
        return self.client


def get_supabase_client() -> Client:
    """
    Returns a Supabase client instance.

    Raises:
        ValueError: If the Supabase client is not available or not initialized
    """
    try:
        return SupabaseClientManager.get_instance().get_client()
    except ValueError as e:
        logger.error(f"Supabase client unavailable: {e}")
        raise
