"""OpenRTB 2.6 -> 2.5 request downgrade.

Re-exports every migration, both clearers and the orchestrator so callers
and tests can import from ``openrtb_compat.core.convert_down`` directly.
"""

from ._clearing import clear_26_fields, clear_202211_fields
from ._migrations import (
    move_consent_to_ext,
    move_eids_to_ext,
    move_gdpr_to_ext,
    move_gpp_sid_to_ext,
    move_gpp_to_ext,
    move_rewarded_to_ext,
    move_rewarded_to_prebid_ext,
    move_supply_chain_to_ext,
    move_us_privacy_to_ext,
)
from ._orchestrator import REQUEST_MIGRATIONS, downgrade_to_25

__all__ = [
    "REQUEST_MIGRATIONS",
    "clear_202211_fields",
    "clear_26_fields",
    "downgrade_to_25",
    "move_consent_to_ext",
    "move_eids_to_ext",
    "move_gdpr_to_ext",
    "move_gpp_sid_to_ext",
    "move_gpp_to_ext",
    "move_rewarded_to_ext",
    "move_rewarded_to_prebid_ext",
    "move_supply_chain_to_ext",
    "move_us_privacy_to_ext",
]
