from typing import Any, Dict

from .errors import GatewayError


class PaymentsProvider:
    """base payments gateway interface."""

    name = "base"

    async def create_order(self, options: Dict[str, Any]) -> Dict[str, Any]:  # pragma: no cover
        raise GatewayError(f"{self.name} provider does not support order creation")

    async def aclose(self) -> None:
        return None
