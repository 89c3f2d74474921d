"""Move 2.6 structured fields into their 2.5 ``ext`` locations.

Each migration touches exactly one field. When the field holds a value it is
merged into the owning object's ``ext`` and then cleared, so a value never
lives in both places. A missing owning object or an empty field is a no-op.
A malformed ``ext`` raises MalformedExtension and leaves the field in place.
"""

import logging

from openrtb_compat.core.extensions import merge_extension, parse_extension
from openrtb_compat.core.schemas import BidRequest, Imp

logger = logging.getLogger(__name__)


def move_supply_chain_to_ext(request: BidRequest) -> None:
    """source.schain -> source.ext.schain"""
    source = request.source
    if source is None or source.schain is None:
        return

    source.ext = merge_extension(source.ext, "schain", source.schain.model_dump(mode="json"))
    source.schain = None
    logger.debug("[convert_down] Moved source.schain to source.ext")


def move_gdpr_to_ext(request: BidRequest) -> None:
    """regs.gdpr -> regs.ext.gdpr

    gdpr=0 is a real signal (GDPR does not apply) and is migrated like any
    other value; only an absent field is skipped.
    """
    regs = request.regs
    if regs is None or regs.gdpr is None:
        return

    regs.ext = merge_extension(regs.ext, "gdpr", regs.gdpr)
    regs.gdpr = None
    logger.debug("[convert_down] Moved regs.gdpr to regs.ext")


def move_consent_to_ext(request: BidRequest) -> None:
    """user.consent -> user.ext.consent"""
    user = request.user
    if user is None or not user.consent:
        return

    user.ext = merge_extension(user.ext, "consent", user.consent)
    user.consent = None
    logger.debug("[convert_down] Moved user.consent to user.ext")


def move_us_privacy_to_ext(request: BidRequest) -> None:
    """regs.us_privacy -> regs.ext.us_privacy"""
    regs = request.regs
    if regs is None or not regs.us_privacy:
        return

    regs.ext = merge_extension(regs.ext, "us_privacy", regs.us_privacy)
    regs.us_privacy = None
    logger.debug("[convert_down] Moved regs.us_privacy to regs.ext")


def move_eids_to_ext(request: BidRequest) -> None:
    """user.eids -> user.ext.eids

    An empty list is left alone: no merge and no clear.
    """
    user = request.user
    if user is None or not user.eids:
        return

    eids = [eid.model_dump(mode="json") for eid in user.eids]
    user.ext = merge_extension(user.ext, "eids", eids)
    user.eids = None
    logger.debug(f"[convert_down] Moved {len(eids)} user.eids to user.ext")


def move_rewarded_to_prebid_ext(imp: Imp) -> None:
    """imp.rwdd -> imp.ext.prebid.is_rewarded_inventory

    Other keys already present under ``imp.ext.prebid`` are kept.
    """
    if not imp.rwdd:
        return

    prebid = parse_extension(imp.ext).get("prebid")
    if not isinstance(prebid, dict):
        prebid = {}
    prebid["is_rewarded_inventory"] = imp.rwdd

    imp.ext = merge_extension(imp.ext, "prebid", prebid)
    imp.rwdd = None
    logger.debug(f"[convert_down] Moved imp.rwdd to imp.ext.prebid for imp {imp.id}")


def move_rewarded_to_ext(request: BidRequest) -> None:
    """Apply move_rewarded_to_prebid_ext to every impression, in order."""
    for imp in request.imp:
        move_rewarded_to_prebid_ext(imp)


def move_gpp_to_ext(request: BidRequest) -> None:
    """regs.gpp -> regs.ext.gpp"""
    regs = request.regs
    if regs is None or not regs.gpp:
        return

    regs.ext = merge_extension(regs.ext, "gpp", regs.gpp)
    regs.gpp = None
    logger.debug("[convert_down] Moved regs.gpp to regs.ext")


def move_gpp_sid_to_ext(request: BidRequest) -> None:
    """regs.gpp_sid -> regs.ext.gpp_sid"""
    regs = request.regs
    if regs is None or not regs.gpp_sid:
        return

    regs.ext = merge_extension(regs.ext, "gpp_sid", list(regs.gpp_sid))
    regs.gpp_sid = None
    logger.debug("[convert_down] Moved regs.gpp_sid to regs.ext")
