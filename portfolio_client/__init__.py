"""
Portfolio API client: one dispatch core for the web, mobile, desktop and CLI frontends.
"""

from portfolio_client.api import PortfolioAPI
from portfolio_client.services import APIClient, ClientEvent, RequestOptions, resolve_config

__all__ = ["APIClient", "ClientEvent", "PortfolioAPI", "RequestOptions", "resolve_config"]
