"""Drop fields OpenRTB 2.5 does not define.

Pure structural walks with no JSON handling, so neither function can fail.
``ext`` objects are never touched. Both are idempotent.
"""

from openrtb_compat.core.schemas import (
    Audio,
    BidRequest,
    Content,
    DistributionChannel,
    Video,
)

_POD_FIELDS = ("poddur", "rqddurs", "podid", "podseq", "slotinpod", "mincpmpersec")


def _clear_pod_fields(descriptor: Audio | Video) -> None:
    for field in _POD_FIELDS:
        setattr(descriptor, field, None)


def _clear_content(content: Content | None) -> None:
    if content is None:
        return
    content.cattax = None
    content.kwarray = None
    content.langb = None
    content.network = None
    content.channel = None
    if content.producer is not None:
        content.producer.cattax = None


def _clear_distribution_channel(channel: DistributionChannel | None) -> None:
    if channel is None:
        return
    channel.cattax = None
    channel.kwarray = None
    _clear_content(channel.content)
    if channel.publisher is not None:
        channel.publisher.cattax = None


def clear_26_fields(request: BidRequest) -> None:
    """Clear every OpenRTB 2.6 field that has no 2.5 counterpart.

    Fields with a 2.5 ``ext`` home (schain, gdpr, us_privacy, consent, eids,
    rwdd) are expected to have been migrated already; anything still left in
    them here is dropped.
    """
    request.wlangb = None
    request.cattax = None

    _clear_distribution_channel(request.app)
    _clear_distribution_channel(request.site)

    if request.device is not None:
        request.device.langb = None
        request.device.sua = None

    if request.regs is not None:
        request.regs.gdpr = None
        request.regs.us_privacy = None

    if request.source is not None:
        request.source.schain = None

    if request.user is not None:
        request.user.kwarray = None
        request.user.consent = None
        request.user.eids = None

    for imp in request.imp:
        imp.rwdd = None
        imp.ssai = None

        if imp.audio is not None:
            _clear_pod_fields(imp.audio)

        if imp.video is not None:
            _clear_pod_fields(imp.video)
            imp.video.maxseq = None


def clear_202211_fields(request: BidRequest) -> None:
    """Clear fields introduced by the 2022-11 OpenRTB 2.6 release.

    ``dooh`` is dropped outright since 2.5 has no slot for it; ``app`` and
    ``site`` stay even if this leaves them empty.
    """
    request.dooh = None

    if request.app is not None:
        request.app.inventorypartnerdomain = None

    if request.site is not None:
        request.site.inventorypartnerdomain = None

    if request.regs is not None:
        request.regs.gpp = None
        request.regs.gpp_sid = None

    for imp in request.imp:
        imp.qty = None
        imp.dt = None
