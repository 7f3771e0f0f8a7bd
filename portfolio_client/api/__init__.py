"""
Domain facade: auth, portfolios, projects, analytics, contact and files.
"""

from portfolio_client.api.facade import PortfolioAPI
from portfolio_client.api.models import (
    AnalyticsEventInput,
    AnalyticsQuery,
    ContactMessageInput,
    LoginCredentials,
    PasswordResetConfirm,
    PasswordResetRequest,
    RegisterData,
)

__all__ = [
    "PortfolioAPI",
    "AnalyticsEventInput",
    "AnalyticsQuery",
    "ContactMessageInput",
    "LoginCredentials",
    "PasswordResetConfirm",
    "PasswordResetRequest",
    "RegisterData",
]
