import logging
from typing import Optional, Dict, Callable, Literal, List, Any, Union

from pydantic import ValidationError
from pyee.asyncio import AsyncIOEventEmitter
from aiortc import RTCIceServer
from .handlers.handler_interface import HandlerInterface
from .ortc import (
    getExtendedRtpCapabilities,
    canSend,
    getRecvRtpCapabilities,
    validateRtpCapabilities,
    validateSctpCapabilities,
)
from .rtp_parameters import ExtendedRtpCapabilities, RtpCapabilities, MediaKind
from .sctp_parameters import SctpCapabilities, SctpParameters
from .errors import InvalidStateError
from .transport import Transport
from .models.transport import IceParameters, IceCandidate, DtlsParameters, InternalTransportOptions, TransportDirection


logger = logging.getLogger(__name__)


class Device:
    def __init__(self, handlerFactory: Callable[..., HandlerInterface], loop=None):
        logger.debug('Device constructor()')

        self._loop = loop
        # RTC handler factory.
        self._handlerFactory: Callable[..., HandlerInterface] = handlerFactory
        # Handler name.
        self._handlerName: Optional[str] = None
        # Loaded flag.
        self._loaded: bool = False
        # Extended RTP capabilities.
        self._extendedRtpCapabilities: Optional[ExtendedRtpCapabilities] = None
        # Local RTP capabilities for receiving media.
        self._recvRtpCapabilities: Optional[RtpCapabilities] = None
        # Whether we can produce audio/video based on computed extended RTP
        # capabilities.
        self._canProduceByKind: Dict[str, bool] = {
            'audio': False,
            'video': False
        }
        # Local SCTP capabilities.
        self._sctpCapabilities: Optional[SctpCapabilities] = None
        # Observer instance.
        self._observer: AsyncIOEventEmitter = AsyncIOEventEmitter(loop=loop)

    # The RTC handler name.
    @property
    def handlerName(self) -> str:
        if not self._loaded:
            raise InvalidStateError('not loaded')
        return self._handlerName

    # Whether the Device is loaded.
    @property
    def loaded(self) -> bool:
        return self._loaded

    # RTP capabilities of the Device for receiving media.
    # @raise {InvalidStateError} if not loaded.
    @property
    def rtpCapabilities(self) -> RtpCapabilities:
        if not self._loaded:
            raise InvalidStateError('not loaded')
        return self._recvRtpCapabilities

    # SCTP capabilities of the Device.
    # @raise {InvalidStateError} if not loaded.
    @property
    def sctpCapabilities(self) -> SctpCapabilities:
        if not self._loaded:
            raise InvalidStateError('not loaded')
        return self._sctpCapabilities

    # Observer.
    # @emits newtransport - (Transport)
    @property
    def observer(self) -> AsyncIOEventEmitter:
        return self._observer

    # Initialize the Device.
    # @raise {InvalidStateError} if already loaded.
    # @raise {TypeError} if invalid routerRtpCapabilities.
    async def load(self, routerRtpCapabilities: Union[RtpCapabilities, dict]):
        logger.debug(f'Device load() [routerRtpCapabilities:{routerRtpCapabilities}]')

        if self._loaded:
            raise InvalidStateError('already loaded')

        if isinstance(routerRtpCapabilities, dict):
            try:
                routerRtpCapabilities = RtpCapabilities(**routerRtpCapabilities)
            except ValidationError as e:
                raise TypeError(str(e)) from e
        elif isinstance(routerRtpCapabilities, RtpCapabilities):
            routerRtpCapabilities = routerRtpCapabilities.model_copy(deep=True)

        # This may raise.
        validateRtpCapabilities(routerRtpCapabilities)

        # Temporal handler to get its capabilities.
        handler: HandlerInterface = self._handlerFactory()

        try:
            nativeRtpCapabilities: RtpCapabilities = await handler.getNativeRtpCapabilities()
            logger.debug(f'Device load() | got native RTP capabilities:{nativeRtpCapabilities}')

            # This may raise.
            nativeRtpCapabilities = nativeRtpCapabilities.model_copy(deep=True)
            validateRtpCapabilities(nativeRtpCapabilities)

            # Get extended RTP capabilities.
            extendedRtpCapabilities = getExtendedRtpCapabilities(nativeRtpCapabilities, routerRtpCapabilities)
            logger.debug(f'Device load() | got extended RTP capabilities:{extendedRtpCapabilities}')

            # Check whether we can produce audio/video.
            canProduceByKind = {
                'audio': canSend('audio', extendedRtpCapabilities),
                'video': canSend('video', extendedRtpCapabilities)
            }

            # Generate our receiving RTP capabilities for receiving media.
            recvRtpCapabilities = getRecvRtpCapabilities(extendedRtpCapabilities)

            # This may raise.
            validateRtpCapabilities(recvRtpCapabilities)
            logger.debug(f'Device load() | got receiving RTP capabilities:{recvRtpCapabilities}')

            # Generate our SCTP capabilities.
            sctpCapabilities: SctpCapabilities = await handler.getNativeSctpCapabilities()

            # This may raise.
            validateSctpCapabilities(sctpCapabilities)
            logger.debug(f'Device load() | got native SCTP capabilities:{sctpCapabilities}')

            self._handlerName = handler.name
        finally:
            await handler.close()

        self._extendedRtpCapabilities = extendedRtpCapabilities
        self._canProduceByKind = canProduceByKind
        self._recvRtpCapabilities = recvRtpCapabilities
        self._sctpCapabilities = sctpCapabilities

        logger.debug('Device load() succeeded')

        self._loaded = True

    # Whether we can produce audio/video.
    # @raise {InvalidStateError} if not loaded.
    # @raise {TypeError} if wrong arguments.
    def canProduce(self, kind: MediaKind) -> bool:
        if not self._loaded:
            raise InvalidStateError('not loaded')
        elif kind not in ('video', 'audio'):
            raise TypeError(f'invalid kind {kind!r}')
        return self._canProduceByKind[kind]

    # Creates a Transport for sending media.
    # @raise {InvalidStateError} if not loaded.
    # @raise {TypeError} if wrong arguments.
    def createSendTransport(
        self,
        id: str,
        iceParameters: Union[IceParameters, dict],
        iceCandidates: List[Union[IceCandidate, dict]],
        dtlsParameters: Union[DtlsParameters, dict],
        sctpParameters: Optional[Union[SctpParameters, dict]] = None,
        iceServers: Optional[List[RTCIceServer]] = None,
        iceTransportPolicy: Optional[Literal['all', 'relay']] = None,
        additionalSettings: Optional[dict] = None,
        proprietaryConstraints: Any = None,
        appData: Optional[dict] = None,
        logger: Optional[logging.Logger] = None
    ) -> Transport:
        return self._createTransport(
            direction='send',
            id=id,
            iceParameters=iceParameters,
            iceCandidates=iceCandidates,
            dtlsParameters=dtlsParameters,
            sctpParameters=sctpParameters,
            iceServers=iceServers,
            iceTransportPolicy=iceTransportPolicy,
            additionalSettings=additionalSettings,
            proprietaryConstraints=proprietaryConstraints,
            appData=appData,
            logger=logger
        )

    # Creates a Transport for receiving media.
    # @raise {InvalidStateError} if not loaded.
    # @raise {TypeError} if wrong arguments.
    def createRecvTransport(
        self,
        id: str,
        iceParameters: Union[IceParameters, dict],
        iceCandidates: List[Union[IceCandidate, dict]],
        dtlsParameters: Union[DtlsParameters, dict],
        sctpParameters: Optional[Union[SctpParameters, dict]] = None,
        iceServers: Optional[List[RTCIceServer]] = None,
        iceTransportPolicy: Optional[Literal['all', 'relay']] = None,
        additionalSettings: Optional[dict] = None,
        proprietaryConstraints: Any = None,
        appData: Optional[dict] = None,
        logger: Optional[logging.Logger] = None
    ) -> Transport:
        return self._createTransport(
            direction='recv',
            id=id,
            iceParameters=iceParameters,
            iceCandidates=iceCandidates,
            dtlsParameters=dtlsParameters,
            sctpParameters=sctpParameters,
            iceServers=iceServers,
            iceTransportPolicy=iceTransportPolicy,
            additionalSettings=additionalSettings,
            proprietaryConstraints=proprietaryConstraints,
            appData=appData,
            logger=logger
        )

    def _createTransport(
        self,
        direction: TransportDirection,
        id: str,
        iceParameters: Union[IceParameters, dict],
        iceCandidates: List[Union[IceCandidate, dict]],
        dtlsParameters: Union[DtlsParameters, dict],
        sctpParameters: Optional[Union[SctpParameters, dict]] = None,
        iceServers: Optional[List[RTCIceServer]] = None,
        iceTransportPolicy: Optional[Literal['all', 'relay']] = None,
        additionalSettings: Optional[dict] = None,
        proprietaryConstraints: Any = None,
        appData: Optional[dict] = None,
        logger: Optional[logging.Logger] = None
    ) -> Transport:
        logging.getLogger(__name__).debug(f'Device _createTransport() [direction:{direction}]')

        if not self._loaded:
            raise InvalidStateError('not loaded')
        elif not isinstance(id, str) or not id:
            raise TypeError('missing id')
        elif not iceParameters:
            raise TypeError('missing iceParameters')
        elif not isinstance(iceCandidates, list):
            raise TypeError('missing iceCandidates')
        elif not dtlsParameters:
            raise TypeError('missing dtlsParameters')
        elif appData is not None and not isinstance(appData, dict):
            raise TypeError('if given, appData must be a dict')

        try:
            options = InternalTransportOptions(
                direction=direction,
                handlerFactory=self._handlerFactory,
                extendedRtpCapabilities=self._extendedRtpCapabilities,
                canProduceByKind=self._canProduceByKind,
                id=id,
                iceParameters=iceParameters,
                iceCandidates=iceCandidates,
                dtlsParameters=dtlsParameters,
                sctpParameters=sctpParameters,
                iceServers=iceServers,
                iceTransportPolicy=iceTransportPolicy,
                additionalSettings=additionalSettings,
                proprietaryConstraints=proprietaryConstraints,
                appData=appData if appData is not None else {},
                logger=logger
            )
        except ValidationError as e:
            raise TypeError(str(e)) from e

        transport = Transport(options=options, loop=self._loop)

        # Emit observer event.
        self._observer.emit('newtransport', transport)

        return transport
