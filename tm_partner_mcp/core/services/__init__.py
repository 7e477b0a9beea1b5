from .partner_client import PartnerAPIClient
from .search_router import SearchRouter, UpstreamCall, plan
from .text_formatter import format_results

__all__ = ["PartnerAPIClient", "SearchRouter", "UpstreamCall", "plan", "format_results"]
