from typing import Literal, List, Optional, Any

from aiortc import RTCIceServer, MediaStreamTrack
from ..emitter import EnhancedEventEmitter
from ..models.transport import IceCandidate, IceParameters, DtlsParameters, TransportDirection
from ..models.producer import ProducerCodecOptions
from ..models.handler_interface import (
    HandlerSendResult,
    HandlerReceiveOptions,
    HandlerReceiveResult,
    HandlerSendDataChannelResult,
    HandlerReceiveDataChannelResult,
)
from ..rtp_parameters import (
    ExtendedRtpCapabilities,
    RtpCapabilities,
    RtpCodecCapability,
    RtpEncodingParameters,
)
from ..sctp_parameters import SctpCapabilities, SctpStreamParameters, SctpParameters


class HandlerInterface(EnhancedEventEmitter):
    """Platform specific media stack driven by a Transport.

    Every coroutine that mutates the underlying connection is only invoked
    through the transport's command queue, so implementations never see two
    of them overlapping.
    """
    # @emits @connect - (dtlsParameters: DtlsParameters)
    #   Listeners are awaited, a raised exception fails the connection.
    # @emits @connectionstatechange - (connectionState: ConnectionState)
    def __init__(self, loop=None):
        super(HandlerInterface, self).__init__(loop=loop)

    @property
    def name(self) -> str:
        pass

    async def close(self):
        pass

    async def getNativeRtpCapabilities(self) -> RtpCapabilities:
        pass

    async def getNativeSctpCapabilities(self) -> SctpCapabilities:
        pass

    def run(
        self,
        direction: TransportDirection,
        iceParameters: IceParameters,
        iceCandidates: List[IceCandidate],
        dtlsParameters: DtlsParameters,
        extendedRtpCapabilities: ExtendedRtpCapabilities,
        sctpParameters: Optional[SctpParameters] = None,
        iceServers: Optional[List[RTCIceServer]] = None,
        iceTransportPolicy: Optional[Literal['all', 'relay']] = None,
        additionalSettings: Optional[Any] = None,
        proprietaryConstraints: Optional[Any] = None,
    ):
        pass

    async def updateIceServers(self, iceServers: List[RTCIceServer]):
        pass

    async def restartIce(self, iceParameters: IceParameters):
        pass

    async def getTransportStats(self) -> Any:
        pass

    async def send(
        self,
        track: MediaStreamTrack,
        encodings: List[RtpEncodingParameters] = [],
        codecOptions: Optional[ProducerCodecOptions] = None,
        codec: Optional[RtpCodecCapability] = None,
    ) -> HandlerSendResult:
        pass

    async def stopSending(self, localId: str):
        pass

    async def replaceTrack(self, localId: str, track: Optional[MediaStreamTrack] = None):
        pass

    async def setMaxSpatialLayer(self, localId: str, spatialLayer: int):
        pass

    async def setRtpEncodingParameters(self, localId: str, params: Any):
        pass

    async def getSenderStats(self, localId: str) -> Any:
        pass

    async def sendDataChannel(
        self,
        streamId: Optional[int] = None,
        ordered: Optional[bool] = True,
        maxPacketLifeTime: Optional[int] = None,
        maxRetransmits: Optional[int] = None,
        priority: Optional[str] = None,
        label: Optional[str] = None,
        protocol: Optional[str] = None,
    ) -> HandlerSendDataChannelResult:
        pass

    # Results are returned in the same order as the given options.
    async def receive(self, optionsList: List[HandlerReceiveOptions]) -> List[HandlerReceiveResult]:
        pass

    async def stopReceiving(self, localIds: List[str]):
        pass

    async def pauseReceiving(self, localIds: List[str]):
        pass

    async def resumeReceiving(self, localIds: List[str]):
        pass

    async def getReceiverStats(self, localId: str) -> Any:
        pass

    async def receiveDataChannel(
        self,
        sctpStreamParameters: SctpStreamParameters,
        label: Optional[str] = None,
        protocol: Optional[str] = None,
    ) -> HandlerReceiveDataChannelResult:
        pass
