import re
from typing import List, Optional, Union

import h264_profile_level_id as h264

from .rtp_parameters import (
    RtpCodec,
    RtcpFeedback,
    RtpHeaderExtension,
    RtpCapabilities,
    ExtendedRtpCapabilities,
    ExtendedCodec,
    ExtendedHeaderExtension,
    RtpCodecCapability,
    MediaKind,
    RtpParameters,
    RtpCodecParameters,
    RtpHeaderExtensionParameters,
    RtpEncodingParameters,
    RtcpParameters,
)
from .sctp_parameters import SctpCapabilities, NumSctpStreams, SctpParameters, SctpStreamParameters


RTP_PROBATOR_MID = 'probator'
RTP_PROBATOR_SSRC = 1234
RTP_PROBATOR_CODEC_PAYLOAD_TYPE = 127

ABS_SEND_TIME_URI = 'http://www.webrtc.org/experiments/rtp-hdrext/abs-send-time'
TRANSPORT_WIDE_CC_URI = 'http://www.ietf.org/id/draft-holmer-rmcat-transport-wide-cc-extensions-01'

MIME_TYPE_REGEX = re.compile(r'^(audio|video)/(.+)', re.IGNORECASE)
RTX_MIME_TYPE_REGEX = re.compile(r'.+/rtx$', re.IGNORECASE)


# Validates RtpCapabilities. It may modify given data by adding missing
# fields with default values.
# It raises TypeError if invalid.
def validateRtpCapabilities(caps: RtpCapabilities):
    if not isinstance(caps, RtpCapabilities):
        raise TypeError('caps is not a RtpCapabilities object')

    for codec in caps.codecs:
        validateRtpCodecCapability(codec)

    for ext in caps.headerExtensions:
        validateRtpHeaderExtension(ext)

def _validateMimeType(mimeType) -> MediaKind:
    if not mimeType or not isinstance(mimeType, str):
        raise TypeError('missing codec.mimeType')

    mimeTypeMatch = MIME_TYPE_REGEX.match(mimeType)
    if not mimeTypeMatch:
        raise TypeError('invalid codec.mimeType')

    return mimeTypeMatch[1].lower()

def _validateCodecParameters(parameters: dict):
    for key, value in parameters.items():
        if value is None:
            parameters[key] = ''
            value = ''

        # bool is an int subclass but never a valid codec parameter.
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            raise TypeError(f'invalid codec parameter [key:{key}, value:{value}]')

        # Specific parameters validation.
        if key == 'apt' and not isinstance(value, int):
            raise TypeError('invalid codec apt parameter')

# Validates RtpCodecCapability. It may modify given data by adding missing
# fields with default values.
# It raises TypeError if invalid.
def validateRtpCodecCapability(codec: RtpCodecCapability):
    # Just override kind with media component of mimeType.
    codec.kind = _validateMimeType(codec.mimeType)

    # channels is optional. If unset, set it to 1 (just if audio).
    if codec.kind == 'audio':
        if codec.channels is None:
            codec.channels = 1
    else:
        codec.channels = None

    _validateCodecParameters(codec.parameters)

    for fb in codec.rtcpFeedback:
        validateRtcpFeedback(fb)

# Validates RtcpFeedback. It may modify given data by adding missing
# fields with default values.
# It raises TypeError if invalid.
def validateRtcpFeedback(fb: RtcpFeedback):
    if not fb.type:
        raise TypeError('missing fb.type')

    # parameter is optional. If unset set it to an empty string.
    if not fb.parameter:
        fb.parameter = ''

# Validates RtpHeaderExtension. It may modify given data by adding missing
# fields with default values.
# It raises TypeError if invalid.
def validateRtpHeaderExtension(ext: RtpHeaderExtension):
    if ext.kind not in (None, 'audio', 'video'):
        raise TypeError('invalid ext.kind')

    if not ext.uri:
        raise TypeError('missing ext.uri')

    if ext.direction is None:
        ext.direction = 'sendrecv'

# Validates RtpParameters. It may modify given data by adding missing
# fields with default values.
# It raises TypeError if invalid.
def validateRtpParameters(params: RtpParameters):
    if not isinstance(params, RtpParameters):
        raise TypeError('params is not a RtpParameters object')

    for codec in params.codecs:
        validateRtpCodecParameters(codec)

    for ext in params.headerExtensions:
        validateRtpHeaderExtensionParameters(ext)

    for encoding in params.encodings:
        validateRtpEncodingParameters(encoding)

    if params.rtcp is None:
        params.rtcp = RtcpParameters()

    validateRtcpParameters(params.rtcp)

# Validates RtpCodecParameters. It may modify given data by adding missing
# fields with default values.
# It raises TypeError if invalid.
def validateRtpCodecParameters(codec: RtpCodecParameters):
    kind = _validateMimeType(codec.mimeType)

    # channels is optional. If unset, set it to 1 (just if audio).
    if kind == 'audio':
        if codec.channels is None:
            codec.channels = 1
    else:
        codec.channels = None

    _validateCodecParameters(codec.parameters)

    for fb in codec.rtcpFeedback:
        validateRtcpFeedback(fb)

# Validates RtpHeaderExtensionParameters. It may modify given data by adding
# missing fields with default values.
# It raises TypeError if invalid.
def validateRtpHeaderExtensionParameters(ext: RtpHeaderExtensionParameters):
    if not ext.uri:
        raise TypeError('missing ext.uri')

    for key, value in ext.parameters.items():
        if value is None:
            ext.parameters[key] = ''
            value = ''

        if isinstance(value, bool) or not isinstance(value, (str, int)):
            raise TypeError('invalid header extension parameter')

# Validates RtpEncodingParameters.
# It raises TypeError if invalid.
def validateRtpEncodingParameters(encoding: RtpEncodingParameters):
    if encoding.rid is not None and not encoding.rid:
        raise TypeError('invalid encoding.rid')

    if encoding.scalabilityMode is not None and not encoding.scalabilityMode:
        raise TypeError('invalid encoding.scalabilityMode')

    if encoding.rtx is not None and encoding.rtx.ssrc is None:
        raise TypeError('missing encoding.rtx.ssrc')

# Validates RtcpParameters. It may modify given data by adding missing
# fields with default values.
def validateRtcpParameters(rtcp: RtcpParameters):
    # reducedSize is optional. If unset set it to True.
    if rtcp.reducedSize is None:
        rtcp.reducedSize = True

# Validates SctpCapabilities.
# It raises TypeError if invalid.
def validateSctpCapabilities(caps: SctpCapabilities):
    if not isinstance(caps, SctpCapabilities):
        raise TypeError('caps is not a SctpCapabilities object')

    validateNumSctpStreams(caps.numStreams)

# Validates NumSctpStreams.
# It raises TypeError if invalid.
def validateNumSctpStreams(numStreams: NumSctpStreams):
    if numStreams.OS <= 0:
        raise TypeError('invalid numStreams.OS')

    if numStreams.MIS <= 0:
        raise TypeError('invalid numStreams.MIS')

# Validates SctpParameters.
# It raises TypeError if invalid.
def validateSctpParameters(params: SctpParameters):
    if not isinstance(params, SctpParameters):
        raise TypeError('params is not a SctpParameters object')

    if params.maxMessageSize <= 0:
        raise TypeError('invalid params.maxMessageSize')

# Validates SctpStreamParameters. It may modify given data by adding missing
# fields with default values.
# It raises TypeError if invalid.
def validateSctpStreamParameters(params: SctpStreamParameters):
    if not isinstance(params, SctpStreamParameters):
        raise TypeError('params is not a SctpStreamParameters object')

    # streamId is mandatory.
    if params.streamId is None:
        raise TypeError('missing params.streamId')

    # ordered is optional.
    orderedGiven = params.ordered is not None
    if not orderedGiven:
        params.ordered = True

    if params.maxPacketLifeTime is not None and params.maxRetransmits is not None:
        raise TypeError('cannot provide both maxPacketLifeTime and maxRetransmits')

    if orderedGiven and params.ordered and (
        params.maxPacketLifeTime is not None or params.maxRetransmits is not None
    ):
        raise TypeError('cannot be ordered with maxPacketLifeTime or maxRetransmits')
    elif not orderedGiven and (
        params.maxPacketLifeTime is not None or params.maxRetransmits is not None
    ):
        params.ordered = False

def isRtxCodec(codec: Optional[RtpCodec]) -> bool:
    if not codec:
        return False
    return bool(RTX_MIME_TYPE_REGEX.match(codec.mimeType))

def _matchChannels(aCodec: RtpCodec, bCodec: RtpCodec) -> bool:
    # Mono (or unspecified) on either side is compatible with anything.
    if aCodec.channels in (None, 1) or bCodec.channels in (None, 1):
        return True
    return aCodec.channels == bCodec.channels

def matchCodecs(aCodec: RtpCodec, bCodec: RtpCodec, strict: bool = False, modify: bool = False) -> bool:
    aMimeType = aCodec.mimeType.lower()
    bMimeType = bCodec.mimeType.lower()
    if aMimeType != bMimeType:
        return False
    if aCodec.clockRate != bCodec.clockRate:
        return False
    if aMimeType.startswith('audio/') and not _matchChannels(aCodec, bCodec):
        return False

    # Per codec special checks.
    if aMimeType == 'video/h264':
        aPacketizationMode = aCodec.parameters.get('packetization-mode', 0)
        bPacketizationMode = bCodec.parameters.get('packetization-mode', 0)
        if aPacketizationMode != bPacketizationMode:
            return False

        # If strict matching check profile-level-id.
        if strict:
            try:
                if not h264.isSameProfile(aCodec.parameters, bCodec.parameters):
                    return False
                selectedProfileLevelId = h264.generateProfileLevelIdForAnswer(
                    aCodec.parameters, bCodec.parameters)
            except (TypeError, ValueError):
                return False

            if modify:
                if selectedProfileLevelId:
                    aCodec.parameters['profile-level-id'] = selectedProfileLevelId
                else:
                    aCodec.parameters.pop('profile-level-id', None)

    elif aMimeType == 'video/vp9':
        # If strict matching check profile-id.
        if strict:
            aProfileId = aCodec.parameters.get('profile-id', 0)
            bProfileId = bCodec.parameters.get('profile-id', 0)
            if aProfileId != bProfileId:
                return False

    return True

def reduceRtcpFeedback(codecA: RtpCodec, codecB: RtpCodec) -> List[RtcpFeedback]:
    reducedRtcpFeedback: List[RtcpFeedback] = []
    for aFb in codecA.rtcpFeedback:
        matchingBFbs = [bFb for bFb in codecB.rtcpFeedback if bFb.type == aFb.type and (
            bFb.parameter == aFb.parameter or (not bFb.parameter and not aFb.parameter))]
        if matchingBFbs:
            reducedRtcpFeedback.append(matchingBFbs[0].model_copy())

    return reducedRtcpFeedback

def matchHeaderExtensions(aExt: RtpHeaderExtension, bExt: RtpHeaderExtension) -> bool:
    if aExt.kind and bExt.kind and aExt.kind != bExt.kind:
        return False
    if aExt.uri != bExt.uri:
        return False
    return True

def _reverseDirection(direction: str) -> str:
    if direction == 'recvonly':
        return 'sendonly'
    elif direction == 'sendonly':
        return 'recvonly'
    return direction

# Generate extended RTP capabilities for sending and receiving.
def getExtendedRtpCapabilities(localCaps: RtpCapabilities, remoteCaps: RtpCapabilities) -> ExtendedRtpCapabilities:
    extendedRtpCapabilities: ExtendedRtpCapabilities = ExtendedRtpCapabilities()

    # Match media codecs and keep the order preferred by remoteCaps.
    for remoteCodec in remoteCaps.codecs:
        if isRtxCodec(remoteCodec):
            continue

        matchingLocalCodec = next((localCodec for localCodec in localCaps.codecs if matchCodecs(
            localCodec, remoteCodec, strict=True, modify=True)), None)

        if not matchingLocalCodec:
            continue

        extendedCodec: ExtendedCodec = ExtendedCodec(
            mimeType=matchingLocalCodec.mimeType,
            kind=matchingLocalCodec.kind or _validateMimeType(matchingLocalCodec.mimeType),
            clockRate=matchingLocalCodec.clockRate,
            channels=matchingLocalCodec.channels,
            localPayloadType=matchingLocalCodec.preferredPayloadType,
            remotePayloadType=remoteCodec.preferredPayloadType,
            localParameters=dict(matchingLocalCodec.parameters),
            remoteParameters=dict(remoteCodec.parameters),
            rtcpFeedback=reduceRtcpFeedback(matchingLocalCodec, remoteCodec)
        )
        extendedRtpCapabilities.codecs.append(extendedCodec)

    # Match RTX codecs.
    for extendedCodec in extendedRtpCapabilities.codecs:
        matchingLocalRtxCodec = next((localCodec for localCodec in localCaps.codecs if isRtxCodec(
            localCodec) and localCodec.parameters.get('apt') == extendedCodec.localPayloadType), None)
        matchingRemoteRtxCodec = next((remoteCodec for remoteCodec in remoteCaps.codecs if isRtxCodec(
            remoteCodec) and remoteCodec.parameters.get('apt') == extendedCodec.remotePayloadType), None)
        if matchingLocalRtxCodec and matchingRemoteRtxCodec:
            extendedCodec.localRtxPayloadType = matchingLocalRtxCodec.preferredPayloadType
            extendedCodec.remoteRtxPayloadType = matchingRemoteRtxCodec.preferredPayloadType

    # Match header extensions.
    for remoteExt in remoteCaps.headerExtensions:
        matchingLocalExt = next((
            localExt for localExt in localCaps.headerExtensions if matchHeaderExtensions(localExt, remoteExt)), None)

        if not matchingLocalExt:
            continue

        extendedExt: ExtendedHeaderExtension = ExtendedHeaderExtension(
            kind=remoteExt.kind,
            uri=remoteExt.uri,
            sendId=matchingLocalExt.preferredId,
            recvId=remoteExt.preferredId,
            encrypt=matchingLocalExt.preferredEncrypt,
            direction=_reverseDirection(remoteExt.direction)
        )

        extendedRtpCapabilities.headerExtensions.append(extendedExt)

    return extendedRtpCapabilities

# Generate RTP capabilities for receiving media based on the given extended
# RTP capabilities.
def getRecvRtpCapabilities(extendedRtpCapabilities: ExtendedRtpCapabilities) -> RtpCapabilities:
    rtpCapabilities: RtpCapabilities = RtpCapabilities()
    for extendedCodec in extendedRtpCapabilities.codecs:
        codec: RtpCodecCapability = RtpCodecCapability(
            mimeType=extendedCodec.mimeType,
            kind=extendedCodec.kind,
            preferredPayloadType=extendedCodec.remotePayloadType,
            clockRate=extendedCodec.clockRate,
            channels=extendedCodec.channels,
            parameters=dict(extendedCodec.localParameters),
            rtcpFeedback=[fb.model_copy() for fb in extendedCodec.rtcpFeedback]
        )
        rtpCapabilities.codecs.append(codec)

        # Add RTX codec.
        if extendedCodec.remoteRtxPayloadType is None:
            continue

        rtxCodec: RtpCodecCapability = RtpCodecCapability(
            mimeType=f'{extendedCodec.kind}/rtx',
            kind=extendedCodec.kind,
            preferredPayloadType=extendedCodec.remoteRtxPayloadType,
            clockRate=extendedCodec.clockRate,
            parameters={
                'apt': extendedCodec.remotePayloadType
            },
            rtcpFeedback=[]
        )

        rtpCapabilities.codecs.append(rtxCodec)

        # TODO: In the future, we need to add FEC, CN, etc, codecs.

    for extendedExtension in extendedRtpCapabilities.headerExtensions:
        # Ignore RTP extensions not valid for receiving.
        if extendedExtension.direction not in ('sendrecv', 'recvonly'):
            continue

        ext: RtpHeaderExtension = RtpHeaderExtension(
            kind=extendedExtension.kind,
            uri=extendedExtension.uri,
            preferredId=extendedExtension.recvId,
            preferredEncrypt=extendedExtension.encrypt,
            direction=extendedExtension.direction
        )

        rtpCapabilities.headerExtensions.append(ext)

    return rtpCapabilities

def _getSendingHeaderExtensions(
    kind: MediaKind,
    extendedRtpCapabilities: ExtendedRtpCapabilities
) -> List[RtpHeaderExtensionParameters]:
    headerExtensions: List[RtpHeaderExtensionParameters] = []
    for extendedExtension in extendedRtpCapabilities.headerExtensions:
        # Ignore RTP extensions of a different kind and those not valid for sending.
        if (extendedExtension.kind and extendedExtension.kind != kind) or \
                extendedExtension.direction not in ('sendrecv', 'sendonly'):
            continue

        ext: RtpHeaderExtensionParameters = RtpHeaderExtensionParameters(
            uri=extendedExtension.uri,
            id=extendedExtension.sendId,
            encrypt=extendedExtension.encrypt,
            parameters={}
        )

        headerExtensions.append(ext)

    return headerExtensions

def _getSendingCodecs(
    kind: MediaKind,
    extendedRtpCapabilities: ExtendedRtpCapabilities,
    remote: bool
) -> List[RtpCodecParameters]:
    codecs: List[RtpCodecParameters] = []
    for extendedCodec in extendedRtpCapabilities.codecs:
        if extendedCodec.kind != kind:
            continue

        codec: RtpCodecParameters = RtpCodecParameters(
            mimeType=extendedCodec.mimeType,
            payloadType=extendedCodec.localPayloadType,
            clockRate=extendedCodec.clockRate,
            channels=extendedCodec.channels,
            parameters=dict(extendedCodec.remoteParameters if remote else extendedCodec.localParameters),
            rtcpFeedback=[fb.model_copy() for fb in extendedCodec.rtcpFeedback]
        )

        codecs.append(codec)

        # Add RTX codec.
        if extendedCodec.localRtxPayloadType is not None:
            rtxCodec: RtpCodecParameters = RtpCodecParameters(
                mimeType=f'{extendedCodec.kind}/rtx',
                payloadType=extendedCodec.localRtxPayloadType,
                clockRate=extendedCodec.clockRate,
                parameters={'apt': extendedCodec.localPayloadType},
                rtcpFeedback=[]
            )

            codecs.append(rtxCodec)

        # A single media codec (plus RTX) per kind.
        break

    return codecs

# Generate RTP parameters of the given kind for sending media.
# NOTE: mid, encodings and rtcp fields are left empty.
def getSendingRtpParameters(kind: MediaKind, extendedRtpCapabilities: ExtendedRtpCapabilities) -> RtpParameters:
    return RtpParameters(
        codecs=_getSendingCodecs(kind, extendedRtpCapabilities, remote=False),
        headerExtensions=_getSendingHeaderExtensions(kind, extendedRtpCapabilities)
    )

# Generate RTP parameters of the given kind suitable for the remote SDP answer.
def getSendingRemoteRtpParameters(kind: MediaKind, extendedRtpCapabilities: ExtendedRtpCapabilities) -> RtpParameters:
    rtpParameters: RtpParameters = RtpParameters(
        codecs=_getSendingCodecs(kind, extendedRtpCapabilities, remote=True),
        headerExtensions=_getSendingHeaderExtensions(kind, extendedRtpCapabilities)
    )

    uris = [ext.uri for ext in rtpParameters.headerExtensions]

    # Reduce codecs' RTCP feedback. Use Transport-CC if available, REMB otherwise.
    if TRANSPORT_WIDE_CC_URI in uris:
        for codec in rtpParameters.codecs:
            codec.rtcpFeedback = [fb for fb in codec.rtcpFeedback if fb.type != 'goog-remb']

    elif ABS_SEND_TIME_URI in uris:
        for codec in rtpParameters.codecs:
            codec.rtcpFeedback = [fb for fb in codec.rtcpFeedback if fb.type != 'transport-cc']

    else:
        for codec in rtpParameters.codecs:
            codec.rtcpFeedback = [fb for fb in codec.rtcpFeedback if fb.type not in ('transport-cc', 'goog-remb')]

    return rtpParameters

# Reduce given codecs by returning an array of codecs "compatible" with the
# given capability codec. If no capability codec is given, take the first
# one(s).
#
# Given codecs must be generated by ortc.getSendingRtpParameters() or
# ortc.getSendingRemoteRtpParameters().
#
# The returned array of codecs also include a RTX codec if available.
def reduceCodecs(
    codecs: List[RtpCodecParameters],
    capCodec: Optional[RtpCodecCapability] = None
) -> List[RtpCodecParameters]:
    filteredCodecs: List[RtpCodecParameters] = []

    # If no capability codec is given, take the first one (and RTX).
    if not capCodec:
        if not codecs:
            raise TypeError('no codecs given')
        filteredCodecs.append(codecs[0])
        if len(codecs) >= 2 and isRtxCodec(codecs[1]):
            filteredCodecs.append(codecs[1])

    # Otherwise look for a compatible set of codecs.
    else:
        for idx, codec in enumerate(codecs):
            if matchCodecs(codec, capCodec):
                filteredCodecs.append(codec)
                if idx + 1 < len(codecs) and isRtxCodec(codecs[idx + 1]):
                    filteredCodecs.append(codecs[idx + 1])
                break

        if not filteredCodecs:
            raise TypeError('no matching codec found')

    return filteredCodecs

# Create RTP parameters for a Consumer for the RTP probator.
def generateProbatorRtpParameters(videoRtpParameters: RtpParameters) -> RtpParameters:
    videoRtpParameters = videoRtpParameters.model_copy(deep=True)

    # This may raise.
    validateRtpParameters(videoRtpParameters)

    if not videoRtpParameters.codecs:
        raise TypeError('missing video codecs')

    rtpParameters: RtpParameters = RtpParameters(
        mid=RTP_PROBATOR_MID,
        encodings=[RtpEncodingParameters(ssrc=RTP_PROBATOR_SSRC)],
        rtcp=RtcpParameters(cname='probator')
    )

    rtpParameters.codecs.append(videoRtpParameters.codecs[0])
    rtpParameters.codecs[0].payloadType = RTP_PROBATOR_CODEC_PAYLOAD_TYPE
    # Only bandwidth estimation extensions are meaningful for the probator.
    rtpParameters.headerExtensions = [
        ext for ext in videoRtpParameters.headerExtensions
        if ext.uri in (ABS_SEND_TIME_URI, TRANSPORT_WIDE_CC_URI)
    ]

    return rtpParameters

# Whether media can be sent based on the given RTP capabilities.
def canSend(kind: MediaKind, extendedRtpCapabilities: ExtendedRtpCapabilities) -> bool:
    return any(codec.kind == kind for codec in extendedRtpCapabilities.codecs)

# Whether the given RTP parameters can be received with the given RTP
# capabilities.
def canReceive(
    rtpParameters: Union[RtpParameters, dict],
    extendedRtpCapabilities: ExtendedRtpCapabilities
) -> bool:
    if isinstance(rtpParameters, dict):
        rtpParameters = RtpParameters(**rtpParameters)

    # This may raise.
    validateRtpParameters(rtpParameters)

    if not rtpParameters.codecs:
        return False

    firstMediaCodec = rtpParameters.codecs[0]

    return any(
        codec.remotePayloadType == firstMediaCodec.payloadType
        for codec in extendedRtpCapabilities.codecs
    )
