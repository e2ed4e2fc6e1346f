from typing import Optional, List, Literal

from pydantic import BaseModel, Field


# Media kind ('audio' or 'video').
MediaKind = Literal['audio', 'video']

# Direction of a RTP header extension.
RtpHeaderExtensionDirection = Literal['sendrecv', 'sendonly', 'recvonly', 'inactive']


# Provides information on RTCP feedback messages for a specific codec. Those
# messages can be transport layer feedback messages or codec-specific feedback
# messages.
class RtcpFeedback(BaseModel):
    type: str
    parameter: str = ''

class Codec(BaseModel):
    # The codec MIME media type/subtype (e.g. 'audio/opus', 'video/VP8').
    mimeType: str
    # Codec clock rate expressed in Hertz.
    clockRate: int
    # The number of channels supported (e.g. two for stereo). Just for audio.
    channels: Optional[int] = None
    # Transport layer and codec-specific feedback messages for this codec.
    rtcpFeedback: List[RtcpFeedback] = []

class RtpCodec(Codec):
    # Codec specific parameters. Some parameters (such as 'packetization-mode'
    # and 'profile-level-id' in H264 or 'profile-id' in VP9) are critical for
    # codec matching.
    parameters: dict = {}

# Result of matching one remote codec against the local ones. Carries both
# sides' payload type numbering.
class ExtendedCodec(Codec):
    kind: MediaKind
    localPayloadType: int
    localRtxPayloadType: Optional[int] = None
    remotePayloadType: int
    remoteRtxPayloadType: Optional[int] = None
    localParameters: dict = {}
    remoteParameters: dict = {}

# Provides information on the capabilities of a codec within the RTP
# capabilities.
#
# Exactly one RtpCodecCapability will be present for each supported combination
# of parameters that requires a distinct value of preferredPayloadType. For
# example:
#
# - Multiple H264 codecs, each with their own distinct 'packetization-mode' and
#   'profile-level-id' values.
# - Multiple VP9 codecs, each with their own distinct 'profile-id' value.
class RtpCodecCapability(RtpCodec):
    # Media kind. Overridden with the media component of mimeType when
    # validated.
    kind: Optional[MediaKind] = None
    # The preferred RTP payload type.
    preferredPayloadType: Optional[int] = None

# Provides information on codec settings within the RTP parameters.
class RtpCodecParameters(RtpCodec):
    # The value that goes in the RTP Payload Type Field. Must be unique.
    payloadType: int

# Provides information relating to supported header extensions.
#
# The direction field is just present in the SFU RTP capabilities. It's
# ignored if present in endpoints' RTP capabilities.
class RtpHeaderExtension(BaseModel):
    # Media kind. If unset, it's valid for all kinds.
    kind: Optional[MediaKind] = None
    # The URI of the RTP header extension, as defined in RFC 5285.
    uri: str
    # The preferred numeric identifier that goes in the RTP packet. Must be
    # unique.
    preferredId: int
    # If True, it is preferred that the value in the header be encrypted as per
    # RFC 6904. Default False.
    preferredEncrypt: bool = False
    # If 'sendrecv', the SFU supports sending and receiving this RTP extension.
    # 'sendonly' means that it can send (but not receive) it. 'recvonly'
    # means that it can receive (but not send) it.
    direction: RtpHeaderExtensionDirection = 'sendrecv'

class ExtendedHeaderExtension(BaseModel):
    kind: Optional[MediaKind] = None
    uri: str
    sendId: int
    recvId: int
    encrypt: bool = False
    direction: RtpHeaderExtensionDirection = 'sendrecv'

# The RTP capabilities define what the SFU or an endpoint can receive at
# media level.
class RtpCapabilities(BaseModel):
    # Supported media and RTX codecs.
    codecs: List[RtpCodecCapability] = []
    # Supported RTP header extensions.
    headerExtensions: List[RtpHeaderExtension] = []
    # Supported FEC mechanisms.
    fecMechanisms: List[str] = []

class RTX(BaseModel):
    ssrc: int

Priority = Literal['very-low', 'low', 'medium', 'high']

# Provides information relating to an encoding, which represents a media RTP
# stream and its associated RTX stream (if any).
class RtpEncodingParameters(BaseModel):
    # The media SSRC.
    ssrc: Optional[int] = None
    # The RID RTP extension value. Must be unique.
    rid: Optional[str] = None
    # Codec payload type this encoding affects. If unset, first media codec is
    # chosen.
    codecPayloadType: Optional[int] = None
    # RTX stream information. It must contain a numeric ssrc field indicating
    # the RTX SSRC.
    rtx: Optional[RTX] = None
    # It indicates whether discontinuous RTP transmission will be used. Default
    # False.
    dtx: bool = False
    # Number of spatial and temporal layers in the RTP stream (e.g. 'L1T3').
    scalabilityMode: Optional[str] = None
    # Others.
    scaleResolutionDownBy: Optional[float] = None
    maxBitrate: Optional[int] = None
    maxFramerate: Optional[float] = None
    adaptivePtime: Optional[bool] = None
    priority: Optional[Priority] = None
    networkPriority: Optional[Priority] = None
    active: Optional[bool] = None

# Defines a RTP header extension within the RTP parameters.
class RtpHeaderExtensionParameters(BaseModel):
    # The URI of the RTP header extension, as defined in RFC 5285.
    uri: str
    # The numeric identifier that goes in the RTP packet. Must be unique.
    id: int
    # If True, the value in the header is encrypted as per RFC 6904. Default False.
    encrypt: bool = False
    # Configuration parameters for the header extension.
    parameters: dict = {}

class RtcpParameters(BaseModel):
    # The Canonical Name (CNAME) used by RTCP (e.g. in SDES messages).
    cname: Optional[str] = None
    # Whether reduced size RTCP RFC 5506 is configured (if True) or compound RTCP
    # as specified in RFC 3550 (if False). Default True.
    reducedSize: bool = True
    # Whether RTCP-mux is used.
    mux: Optional[bool] = None

# The RTP send parameters describe a media stream sent by an endpoint through
# its corresponding Producer. These parameters may include a mid value that
# the SFU will use to match received RTP packets based on their MID RTP
# extension value.
#
# The RTP receive parameters describe a media stream as sent by the SFU to
# an endpoint through its corresponding Consumer. There is a single entry in
# the encodings array (even if the corresponding producer uses simulcast).
class RtpParameters(BaseModel):
    # The MID RTP extension value as defined in the BUNDLE specification.
    mid: Optional[str] = None
    # Media and RTX codecs in use.
    codecs: List[RtpCodecParameters] = []
    # RTP header extensions in use.
    headerExtensions: List[RtpHeaderExtensionParameters] = []
    # Transmitted RTP streams and their settings.
    encodings: List[RtpEncodingParameters] = []
    # Parameters used for RTCP.
    rtcp: RtcpParameters = Field(default_factory=RtcpParameters)

class ExtendedRtpCapabilities(BaseModel):
    codecs: List[ExtendedCodec] = []
    headerExtensions: List[ExtendedHeaderExtension] = []
