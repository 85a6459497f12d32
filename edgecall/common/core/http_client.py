import logging

import httpx
import urllib3

from .config import BaseAppConfig

logger = logging.getLogger(__name__)


class HttpClientFactory:
    """
    HTTP Client Factory for centralized SSL verification handling.
    """

    def __init__(self, config: BaseAppConfig):
        self.config = config

    def configure_global_settings(self):
        """
        Configure global settings like urllib3 warnings.
        """
        if not self.config.VERIFY_SSL:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
            logger.debug("InsecureRequestWarning disabled (VERIFY_SSL=False)")

    def create_async_client(self, **kwargs) -> httpx.AsyncClient:
        """
        Create an httpx.AsyncClient shared by both edge function transports.

        Args:
            **kwargs: Additional arguments for httpx.AsyncClient
        """
        verify = kwargs.pop("verify", None)
        if verify is None:
            verify = self.config.VERIFY_SSL

        if "limits" not in kwargs:
            max_connections = self.config.HTTP_MAX_CONNECTIONS
            kwargs["limits"] = httpx.Limits(
                max_keepalive_connections=max_connections, max_connections=max_connections
            )
        # Host HTTP(S)_PROXY settings are ignored unless the caller opts in.
        kwargs.setdefault("trust_env", False)

        return httpx.AsyncClient(verify=verify, **kwargs)
