"""OpenRTB 2.6 bid request models.

Field names are the OpenRTB wire names. Every optional field defaults to
``None``; "absent" is always ``None`` and clearing a field means assigning
``None`` back to it. Only the fields the downgrade and pod transforms read or
clear are modelled explicitly, along with the usual identifying fields.
Anything else passes through as model extra (see ``get_pydantic_extra_mode``).

``ext`` is kept as raw JSON bytes, the same way it travels on the wire, so a
malformed extension survives parsing and is only rejected when something has
to merge into it.
"""

import json
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer

from openrtb_compat.core.config import get_pydantic_extra_mode
from openrtb_compat.core.extensions import dump_extension


def _coerce_extension(value: Any) -> Any:
    """Accept ext as raw bytes/str (kept verbatim) or as parsed JSON (canonicalised)."""
    if value is None or isinstance(value, bytes):
        return value
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, bytearray):
        return bytes(value)
    return dump_extension(value)


def _serialize_extension(value: bytes | None) -> Any:
    if value is None:
        return None
    # Embed as a JSON value; a malformed ext fails serialization here.
    return json.loads(value)


Extension = Annotated[
    bytes | None,
    BeforeValidator(_coerce_extension),
    PlainSerializer(_serialize_extension, when_used="json"),
]


class OpenRTBBaseModel(BaseModel):
    """Base model for every OpenRTB object.

    - ``extra`` follows the environment (see ``get_pydantic_extra_mode``).
    - ``model_dump`` / ``model_dump_json`` omit ``None`` fields by default,
      matching the protocol's omit-when-empty serialization.
    """

    model_config = ConfigDict(extra=get_pydantic_extra_mode())

    def model_dump(self, **kwargs):
        kwargs.setdefault("exclude_none", True)
        return super().model_dump(**kwargs)

    def model_dump_json(self, **kwargs):
        kwargs.setdefault("exclude_none", True)
        return super().model_dump_json(**kwargs)


# --- Supply chain / source ---


class SupplyChainNode(OpenRTBBaseModel):
    asi: str = ""
    sid: str = ""
    rid: str | None = None
    name: str | None = None
    domain: str | None = None
    hp: int | None = None
    ext: Extension = None


class SupplyChain(OpenRTBBaseModel):
    """OpenRTB 2.6 ``source.schain`` (2.5 carries it as ``source.ext.schain``)."""

    complete: int = 0
    nodes: list[SupplyChainNode] = Field(default_factory=list)
    ver: str = ""
    ext: Extension = None


class Source(OpenRTBBaseModel):
    fd: int | None = None
    tid: str | None = None
    pchain: str | None = None
    schain: SupplyChain | None = None  # 2.6
    ext: Extension = None


# --- Regulations / user ---


class Regs(OpenRTBBaseModel):
    coppa: int | None = None
    gdpr: int | None = None  # 2.6; 0 is a meaningful value
    us_privacy: str | None = None  # 2.6
    gpp: str | None = None  # 2.6-202211
    gpp_sid: list[int] | None = None  # 2.6-202211
    ext: Extension = None


class UID(OpenRTBBaseModel):
    id: str | None = None
    atype: int | None = None
    ext: Extension = None


class EID(OpenRTBBaseModel):
    source: str | None = None
    uids: list[UID] | None = None
    ext: Extension = None


class User(OpenRTBBaseModel):
    id: str | None = None
    buyeruid: str | None = None
    yob: int | None = None
    gender: str | None = None
    keywords: str | None = None
    kwarray: list[str] | None = None  # 2.6
    customdata: str | None = None
    consent: str | None = None  # 2.6
    eids: list[EID] | None = None  # 2.6
    ext: Extension = None


# --- Device ---


class BrandVersion(OpenRTBBaseModel):
    brand: str | None = None
    version: list[str] | None = None
    ext: Extension = None


class UserAgent(OpenRTBBaseModel):
    """Structured user agent (``device.sua``), introduced in 2.6."""

    browsers: list[BrandVersion] | None = None
    platform: BrandVersion | None = None
    mobile: int | None = None
    architecture: str | None = None
    bitness: str | None = None
    model: str | None = None
    source: int | None = None
    ext: Extension = None


class Device(OpenRTBBaseModel):
    ua: str | None = None
    sua: UserAgent | None = None  # 2.6
    dnt: int | None = None
    lmt: int | None = None
    ip: str | None = None
    ipv6: str | None = None
    devicetype: int | None = None
    make: str | None = None
    model: str | None = None
    os: str | None = None
    osv: str | None = None
    w: int | None = None
    h: int | None = None
    language: str | None = None
    langb: str | None = None  # 2.6
    ifa: str | None = None
    ext: Extension = None


# --- Distribution channels and content ---


class Publisher(OpenRTBBaseModel):
    id: str | None = None
    name: str | None = None
    cattax: int | None = None  # 2.6
    cat: list[str] | None = None
    domain: str | None = None
    ext: Extension = None


class Producer(OpenRTBBaseModel):
    id: str | None = None
    name: str | None = None
    cattax: int | None = None  # 2.6
    cat: list[str] | None = None
    domain: str | None = None
    ext: Extension = None


class Network(OpenRTBBaseModel):
    """Content network, 2.6 only."""

    id: str | None = None
    name: str | None = None
    domain: str | None = None
    ext: Extension = None


class Channel(OpenRTBBaseModel):
    """Content channel, 2.6 only."""

    id: str | None = None
    name: str | None = None
    domain: str | None = None
    ext: Extension = None


class Content(OpenRTBBaseModel):
    id: str | None = None
    episode: int | None = None
    title: str | None = None
    series: str | None = None
    season: str | None = None
    artist: str | None = None
    genre: str | None = None
    album: str | None = None
    isrc: str | None = None
    producer: Producer | None = None
    url: str | None = None
    cattax: int | None = None  # 2.6
    cat: list[str] | None = None
    prodq: int | None = None
    context: int | None = None
    contentrating: str | None = None
    userrating: str | None = None
    qagmediarating: int | None = None
    keywords: str | None = None
    kwarray: list[str] | None = None  # 2.6
    livestream: int | None = None
    sourcerelationship: int | None = None
    len: int | None = None
    language: str | None = None
    langb: str | None = None  # 2.6
    embeddable: int | None = None
    network: Network | None = None  # 2.6
    channel: Channel | None = None  # 2.6
    ext: Extension = None


class DistributionChannel(OpenRTBBaseModel):
    """Fields shared by ``app`` and ``site``."""

    id: str | None = None
    name: str | None = None
    domain: str | None = None
    cattax: int | None = None  # 2.6
    cat: list[str] | None = None
    sectioncat: list[str] | None = None
    pagecat: list[str] | None = None
    privacypolicy: int | None = None
    publisher: Publisher | None = None
    content: Content | None = None
    keywords: str | None = None
    kwarray: list[str] | None = None  # 2.6
    inventorypartnerdomain: str | None = None  # 2.6-202211
    ext: Extension = None


class App(DistributionChannel):
    bundle: str | None = None
    storeurl: str | None = None
    ver: str | None = None
    paid: int | None = None


class Site(DistributionChannel):
    page: str | None = None
    ref: str | None = None
    search: str | None = None
    mobile: int | None = None


class DOOH(OpenRTBBaseModel):
    """Digital out-of-home channel (2.6-202211). OpenRTB 2.5 has no equivalent."""

    id: str | None = None
    name: str | None = None
    venuetype: list[str] | None = None
    venuetypetax: int | None = None
    publisher: Publisher | None = None
    domain: str | None = None
    keywords: str | None = None
    content: Content | None = None
    ext: Extension = None


# --- Impressions ---


class Format(OpenRTBBaseModel):
    w: int | None = None
    h: int | None = None
    wratio: int | None = None
    hratio: int | None = None
    wmin: int | None = None
    ext: Extension = None


class Banner(OpenRTBBaseModel):
    format: list[Format] | None = None
    w: int | None = None
    h: int | None = None
    btype: list[int] | None = None
    battr: list[int] | None = None
    pos: int | None = None
    mimes: list[str] | None = None
    topframe: int | None = None
    api: list[int] | None = None
    id: str | None = None
    ext: Extension = None


class PodDescriptor(OpenRTBBaseModel):
    """Fields shared by ``video`` and ``audio``, including the 2.6 pod fields."""

    mimes: list[str] | None = None
    minduration: int | None = None
    maxduration: int | None = None
    poddur: int | None = None  # 2.6
    protocols: list[int] | None = None
    startdelay: int | None = None
    rqddurs: list[int] | None = None  # 2.6
    podid: int | None = None  # 2.6
    podseq: int | None = None  # 2.6
    sequence: int | None = None
    slotinpod: int | None = None  # 2.6
    mincpmpersec: float | None = None  # 2.6
    battr: list[int] | None = None
    maxextended: int | None = None
    minbitrate: int | None = None
    maxbitrate: int | None = None
    delivery: list[int] | None = None
    api: list[int] | None = None
    maxseq: int | None = None
    ext: Extension = None


class Video(PodDescriptor):
    # maxseq is a 2.6 addition for video (audio already had it in 2.5).
    w: int | None = None
    h: int | None = None
    placement: int | None = None
    plcmt: int | None = None
    linearity: int | None = None
    skip: int | None = None
    skipmin: int | None = None
    skipafter: int | None = None
    boxingallowed: int | None = None
    playbackmethod: list[int] | None = None
    playbackend: int | None = None
    pos: int | None = None
    companionad: list[Banner] | None = None
    companiontype: list[int] | None = None


class Audio(PodDescriptor):
    companionad: list[Banner] | None = None
    companiontype: list[int] | None = None
    feed: int | None = None
    stitched: int | None = None
    nvol: int | None = None


class Native(OpenRTBBaseModel):
    request: str | None = None
    ver: str | None = None
    api: list[int] | None = None
    battr: list[int] | None = None
    ext: Extension = None


class Qty(OpenRTBBaseModel):
    """Impression quantity multiplier (2.6-202211), mainly for DOOH."""

    multiplier: float | None = None
    sourcetype: int | None = None
    vendor: str | None = None
    ext: Extension = None


class Imp(OpenRTBBaseModel):
    id: str | None = None
    banner: Banner | None = None
    video: Video | None = None
    audio: Audio | None = None
    native: Native | None = None
    displaymanager: str | None = None
    displaymanagerver: str | None = None
    instl: int | None = None
    tagid: str | None = None
    bidfloor: float | None = None
    bidfloorcur: str | None = None
    clickbrowser: int | None = None
    secure: int | None = None
    exp: int | None = None
    rwdd: int | None = None  # 2.6
    ssai: int | None = None  # 2.6
    qty: Qty | None = None  # 2.6-202211
    dt: float | None = None  # 2.6-202211
    ext: Extension = None


class BidRequest(OpenRTBBaseModel):
    """Root bid request. ``app``, ``site`` and ``dooh`` are mutually exclusive on the wire."""

    id: str | None = None
    imp: list[Imp] = Field(default_factory=list)
    site: Site | None = None
    app: App | None = None
    dooh: DOOH | None = None  # 2.6-202211
    device: Device | None = None
    user: User | None = None
    test: int | None = None
    at: int | None = None
    tmax: int | None = None
    wseat: list[str] | None = None
    bseat: list[str] | None = None
    allimps: int | None = None
    cur: list[str] | None = None
    wlang: list[str] | None = None
    wlangb: list[str] | None = None  # 2.6
    cattax: int | None = None  # 2.6
    bcat: list[str] | None = None
    badv: list[str] | None = None
    bapp: list[str] | None = None
    source: Source | None = None
    regs: Regs | None = None
    ext: Extension = None
