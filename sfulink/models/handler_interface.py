from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from ..sctp_parameters import SctpStreamParameters
from ..rtp_parameters import RtpParameters, MediaKind


class HandlerSendResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    localId: str
    rtpParameters: RtpParameters
    rtpSender: Optional[Any] = None


class HandlerReceiveOptions(BaseModel):
    trackId: str
    kind: MediaKind
    rtpParameters: RtpParameters
    streamId: Optional[str] = None


class HandlerReceiveResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    localId: str
    track: Any
    rtpReceiver: Optional[Any] = None


class HandlerSendDataChannelResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    dataChannel: Any
    sctpStreamParameters: SctpStreamParameters


class HandlerReceiveDataChannelResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    dataChannel: Any
