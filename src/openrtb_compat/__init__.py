"""Downgrade OpenRTB 2.6 bid requests to 2.5 and expand pod impressions."""

from openrtb_compat.core.convert_down import downgrade_to_25
from openrtb_compat.core.exceptions import MalformedExtension, OpenRTBCompatError
from openrtb_compat.core.extensions import merge_extension
from openrtb_compat.core.logging_config import setup_logging
from openrtb_compat.core.pod_expansion import expand_pod_impressions, expand_pods
from openrtb_compat.core.schemas import BidRequest, Imp

__all__ = [
    "BidRequest",
    "Imp",
    "MalformedExtension",
    "OpenRTBCompatError",
    "downgrade_to_25",
    "expand_pod_impressions",
    "expand_pods",
    "merge_extension",
    "setup_logging",
]
