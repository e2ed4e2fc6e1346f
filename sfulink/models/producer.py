from typing import List, Optional
from aiortc import MediaStreamTrack
from pydantic import BaseModel, ConfigDict

from ..rtp_parameters import RtpCodecCapability, RtpEncodingParameters


# Codec specific options applied by the handler when producing.
class ProducerCodecOptions(BaseModel):
    opusStereo: Optional[bool] = None
    opusFec: Optional[bool] = None
    opusDtx: Optional[bool] = None
    opusMaxPlaybackRate: Optional[int] = None
    opusMaxAverageBitrate: Optional[int] = None
    opusPtime: Optional[int] = None
    opusNack: Optional[bool] = None
    videoGoogleStartBitrate: Optional[int] = None
    videoGoogleMaxBitrate: Optional[int] = None
    videoGoogleMinBitrate: Optional[int] = None

class ProducerOptions(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    track: Optional[MediaStreamTrack] = None
    encodings: List[RtpEncodingParameters] = []
    codecOptions: Optional[ProducerCodecOptions] = None
    codec: Optional[RtpCodecCapability] = None
    stopTracks: bool = True
    disableTrackOnPause: bool = True
    zeroRtpOnPause: bool = False
    appData: dict = {}
