"""OpenRTB 2.6 -> 2.5 downgrade pipeline."""

import logging
from collections.abc import Callable

from openrtb_compat.core.convert_down._clearing import clear_26_fields, clear_202211_fields
from openrtb_compat.core.convert_down._migrations import (
    move_consent_to_ext,
    move_eids_to_ext,
    move_gdpr_to_ext,
    move_gpp_sid_to_ext,
    move_gpp_to_ext,
    move_rewarded_to_ext,
    move_supply_chain_to_ext,
    move_us_privacy_to_ext,
)
from openrtb_compat.core.schemas import BidRequest

logger = logging.getLogger(__name__)

# Each step touches a disjoint field, so the order among them carries no
# meaning; it is fixed only to keep runs reproducible.
REQUEST_MIGRATIONS: tuple[Callable[[BidRequest], None], ...] = (
    move_supply_chain_to_ext,
    move_gdpr_to_ext,
    move_consent_to_ext,
    move_us_privacy_to_ext,
    move_eids_to_ext,
    move_rewarded_to_ext,
    move_gpp_to_ext,
    move_gpp_sid_to_ext,
)


def downgrade_to_25(request: BidRequest) -> None:
    """Rewrite an OpenRTB 2.6 request in place so it only uses 2.5 fields.

    Runs every migration in REQUEST_MIGRATIONS, then drops all remaining 2.6
    and 2.6-202211 fields.

    Args:
        request: Request to mutate.

    Raises:
        MalformedExtension: If an ``ext`` that has to be merged into is not a
            JSON object. Migrations applied before the failure stay applied
            and no clearing runs, so the request must be discarded.
    """
    logger.info(f"Downgrading request to OpenRTB 2.5: RequestID={request.id}, NumberOfImp={len(request.imp)}")

    for migrate in REQUEST_MIGRATIONS:
        migrate(request)

    clear_26_fields(request)
    clear_202211_fields(request)
