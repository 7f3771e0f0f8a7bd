"""
PortfolioAPI - typed entry point grouping every domain resource.
"""

from portfolio_client.api.analytics import AnalyticsAPI
from portfolio_client.api.auth import AuthAPI
from portfolio_client.api.contact import ContactAPI
from portfolio_client.api.files import FilesAPI
from portfolio_client.api.portfolios import PortfoliosAPI
from portfolio_client.api.projects import ProjectsAPI
from portfolio_client.services.client import APIClient, get_api_client


class PortfolioAPI:
    """
    Resource-oriented methods over one APIClient.

    Usage:
        api = PortfolioAPI(APIClient(resolve_config(platform="desktop")))
        await api.auth.login(LoginCredentials(email=..., password=...))
        projects = await api.projects.list(QueryParams(page=1, page_size=20))
    """

    def __init__(self, client: APIClient | None = None):
        self.client = client or get_api_client()
        self.auth = AuthAPI(self.client)
        self.portfolios = PortfoliosAPI(self.client)
        self.projects = ProjectsAPI(self.client)
        self.analytics = AnalyticsAPI(self.client)
        self.contact = ContactAPI(self.client)
        self.files = FilesAPI(self.client)

    async def close(self) -> None:
        await self.client.close()

    async def __aenter__(self) -> "PortfolioAPI":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
