"""
Contact form endpoint.
"""

from typing import Any

from portfolio_client.api.base import BaseResource
from portfolio_client.api.models import ContactMessageInput, to_body
from portfolio_client.services.types import APIResponse


class ContactAPI(BaseResource):
    prefix = "contact"

    async def send(self, message: ContactMessageInput) -> APIResponse[Any]:
        return await self.client.post(self.path(), json=to_body(message))
