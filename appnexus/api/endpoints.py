"""AppNexus API service paths.

Paths are compared by identity when choosing a rate limit category and
when deciding whether a call may trigger a token refresh; they are never
parsed.
"""

from enum import StrEnum


class Endpoint(StrEnum):
    """Logical service names mapped to API paths."""
    AUTHENTICATION_SERVICE = "/auth"
    USER_SERVICE = "/user"
    MEMBER_SERVICE = "/member"
    ADVERTISER_SERVICE = "/advertiser"
    INSERTION_ORDER_SERVICE = "/insertion-order"
    LINE_ITEM_SERVICE = "/line-item"
    CAMPAIGN_SERVICE = "/campaign"
    CREATIVE_SERVICE = "/creative"
    PROFILE_SERVICE = "/profile"
    SEGMENT_SERVICE = "/segment"
    PUBLISHER_SERVICE = "/publisher"
    SITE_SERVICE = "/site"
    PLACEMENT_SERVICE = "/placement"
    REPORT_SERVICE = "/report"
    REPORT_DOWNLOAD_SERVICE = "/report-download"


AUTHENTICATION_SERVICE = Endpoint.AUTHENTICATION_SERVICE
