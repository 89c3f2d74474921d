"""Expand pod-shaped impressions into discrete per-slot impressions.

OpenRTB 2.6 describes an ad break as one impression with a total pod duration
(``poddur``) and a slot count (``maxseq``). Bidders that only speak 2.5 need
one impression per slot instead.
"""

import logging
from collections.abc import Sequence

from openrtb_compat.core.schemas import BidRequest, Imp, PodDescriptor

logger = logging.getLogger(__name__)

POD_ONLY_FIELDS = ("poddur", "maxseq", "podid", "podseq", "rqddurs", "slotinpod", "mincpmpersec")


def _is_pod(descriptor: PodDescriptor | None) -> bool:
    return descriptor is not None and descriptor.poddur is not None and (descriptor.maxseq or 0) > 0


def _pod_media_field(imp: Imp) -> str | None:
    """Name of the impression's pod descriptor field; video wins over audio."""
    if _is_pod(imp.video):
        return "video"
    if _is_pod(imp.audio):
        return "audio"
    return None


def _build_slot(imp: Imp, media_field: str, imp_id: str, slot_duration: int) -> Imp:
    slot = imp.model_copy(deep=True)
    slot.id = imp_id

    # A slot is never a pod, including on the media type that was not expanded.
    for descriptor in (slot.video, slot.audio):
        if descriptor is None:
            continue
        for field in POD_ONLY_FIELDS:
            setattr(descriptor, field, None)

    getattr(slot, media_field).maxduration = slot_duration
    return slot


def expand_pod_impressions(imps: Sequence[Imp]) -> list[Imp]:
    """Split every pod impression into ``maxseq`` slot impressions.

    Slot ``j`` of the impression at position ``i`` gets id ``"{i}_{j}"`` and
    ``maxduration = poddur // maxseq``; everything else (mimes, w/h, ext,
    floors) is copied from the source and all pod-only fields are cleared on
    both ``video`` and ``audio``. When both carry a pod, the video pod is the
    one expanded.
    Non-pod impressions are passed through as-is.

    Args:
        imps: Impressions in request order.

    Returns:
        A new list: the in-order concatenation of each impression's expansion.
    """
    expanded: list[Imp] = []

    for position, imp in enumerate(imps):
        media_field = _pod_media_field(imp)
        if media_field is None:
            expanded.append(imp)
            continue

        descriptor = getattr(imp, media_field)
        slot_count = descriptor.maxseq
        slot_duration = descriptor.poddur // slot_count

        logger.debug(
            f"Expanding {media_field} pod imp {imp.id} at position {position}: "
            f"{slot_count} slots of {slot_duration}s (poddur={descriptor.poddur})"
        )
        expanded.extend(
            _build_slot(imp, media_field, f"{position}_{slot}", slot_duration) for slot in range(slot_count)
        )

    return expanded


def expand_pods(request: BidRequest) -> None:
    """Replace ``request.imp`` with its pod expansion, in place."""
    request.imp = expand_pod_impressions(request.imp)
