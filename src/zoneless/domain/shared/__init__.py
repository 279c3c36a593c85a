"""Shared domain utilities.

This package is domain-accessible and should not depend on application code.
"""

from .payout_gateway_protocol import PayoutGatewayProtocol

__all__ = ["PayoutGatewayProtocol"]
