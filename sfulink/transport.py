import logging
from typing import Optional, List, Any, Dict, Union

from pydantic import BaseModel, ValidationError
from pyee.asyncio import AsyncIOEventEmitter
from aiortc import RTCIceServer, MediaStreamTrack
from .ortc import canReceive, validateRtpParameters, validateSctpStreamParameters
from .channel import (
    EntityChannel,
    EntityKind,
    CloseRequest,
    PauseRequest,
    ResumeRequest,
    GetStatsRequest,
    ReplaceTrackRequest,
    SetMaxSpatialLayerRequest,
    SetRtpEncodingParametersRequest,
)
from .command_queue import CommandQueue
from .consumer_scheduler import ConsumerScheduler
from .errors import InvalidStateError, UnsupportedError
from .emitter import EnhancedEventEmitter
from .handlers.handler_interface import HandlerInterface
from .models.handler_interface import (
    HandlerSendResult,
    HandlerReceiveResult,
    HandlerSendDataChannelResult,
    HandlerReceiveDataChannelResult,
)
from .models.transport import ConnectionState, IceParameters, InternalTransportOptions, DtlsParameters, TransportDirection
from .models.producer import ProducerOptions, ProducerCodecOptions
from .models.consumer import ConsumerOptions
from .models.data_producer import DataProducerOptions
from .models.data_consumer import DataConsumerOptions
from .consumer import Consumer
from .producer import Producer
from .data_consumer import DataConsumer
from .data_producer import DataProducer
from .rtp_parameters import RtpParameters, RtpCodecCapability, RtpEncodingParameters, MediaKind, Priority
from .sctp_parameters import SctpStreamParameters


# Settings owned by the transport itself, never taken from additionalSettings.
RESERVED_SETTINGS = ('iceServers', 'iceTransportPolicy', 'bundlePolicy', 'rtcpMuxPolicy', 'sdpSemantics')


def _parseOptions(model, **kwargs):
    try:
        return model(**kwargs)
    except ValidationError as e:
        raise TypeError(str(e)) from e


class Transport(EnhancedEventEmitter):
    # @emits connect - (dtlsParameters: DtlsParameters)
    # @emits connectionstatechange - (connectionState: ConnectionState)
    # @emits produce - (kind, rtpParameters, appData) -> producer id
    # @emits producedata - (sctpStreamParameters, label, protocol, appData) -> data producer id
    def __init__(
        self,
        options: InternalTransportOptions,
        loop=None
    ):
        super(Transport, self).__init__(loop=loop)

        self._logger: logging.Logger = options.logger or logging.getLogger(__name__)
        self._logger.debug(f'Transport constructor() [id:{options.id}, direction:{options.direction}]')

        self._loop = loop
        # Closed flag.
        self._closed: bool = False
        # Transport connection state.
        self._connectionState: ConnectionState = 'new'
        # Producers indexed by id.
        self._producers: Dict[str, Producer] = {}
        # Consumers indexed by id.
        self._consumers: Dict[str, Consumer] = {}
        # DataProducers indexed by id.
        self._dataProducers: Dict[str, DataProducer] = {}
        # DataConsumers indexed by id.
        self._dataConsumers: Dict[str, DataConsumer] = {}
        # Observer instance.
        self._observer: AsyncIOEventEmitter = AsyncIOEventEmitter(loop=loop)

        # Id.
        self._id: str = options.id
        # Direction.
        self._direction: TransportDirection = options.direction
        # Extended RTP capabilities.
        self._extendedRtpCapabilities = options.extendedRtpCapabilities
        # Whether we can produce audio/video based on computed extended RTP
        # capabilities.
        self._canProduceByKind: Dict[str, bool] = options.canProduceByKind
        # SCTP max message size if enabled, None otherwise.
        self._maxSctpMessageSize: Optional[int] = \
            options.sctpParameters.maxMessageSize if options.sctpParameters else None

        if options.additionalSettings:
            additionalSettings = {
                key: value for key, value in options.additionalSettings.items()
                if key not in RESERVED_SETTINGS
            }
        else:
            additionalSettings = None

        self._handler: HandlerInterface = options.handlerFactory()

        self._handler.run(
            direction=options.direction,
            iceParameters=options.iceParameters,
            iceCandidates=options.iceCandidates,
            dtlsParameters=options.dtlsParameters,
            sctpParameters=options.sctpParameters,
            iceServers=options.iceServers,
            iceTransportPolicy=options.iceTransportPolicy,
            additionalSettings=additionalSettings,
            proprietaryConstraints=options.proprietaryConstraints,
            extendedRtpCapabilities=options.extendedRtpCapabilities
        )

        # App custom data.
        self._appData: dict = options.appData

        # Serializes every operation touching the handler.
        self._commandQueue = CommandQueue(
            logger=self._logger.getChild('CommandQueue'),
            loop=loop
        )
        self._consumerScheduler = ConsumerScheduler(
            queue=self._commandQueue,
            handler=self._handler,
            consumerFactory=self._createConsumer,
            logger=self._logger.getChild('ConsumerScheduler'),
            loop=loop
        )

        self._handleHandler()

    # Transport id.
    @property
    def id(self) -> str:
        return self._id

    # Whether the Transport is closed.
    @property
    def closed(self) -> bool:
        return self._closed

    # Transport direction.
    @property
    def direction(self) -> TransportDirection:
        return self._direction

    # RTC handler instance.
    @property
    def handler(self) -> HandlerInterface:
        return self._handler

    # Connection state.
    @property
    def connectionState(self) -> ConnectionState:
        return self._connectionState

    # App custom data.
    @property
    def appData(self) -> Any:
        return self._appData

    # Invalid setter.
    @appData.setter
    def appData(self, value):
        raise Exception('cannot override appData object')

    # Observer.
    #
    # @emits close
    # @emits newproducer - (producer: Producer)
    # @emits newconsumer - (consumer: Consumer)
    # @emits newdataproducer - (dataProducer: DataProducer)
    # @emits newdataconsumer - (dataConsumer: DataConsumer)
    @property
    def observer(self) -> AsyncIOEventEmitter:
        return self._observer

    # Close the Transport.
    async def close(self):
        if self._closed:
            return

        self._logger.debug('Transport close()')

        self._closed = True

        # Reject every queued operation and pending Consumer creation.
        self._commandQueue.close()
        self._consumerScheduler.close()

        for entities in (self._producers, self._consumers, self._dataProducers, self._dataConsumers):
            for entity in list(entities.values()):
                entity.transportClosed()
            entities.clear()

        # Emit observer event.
        self._observer.emit('close')

        # Close the handler.
        await self._handler.close()

    # Get associated Transport stats.
    async def getStats(self) -> Any:
        if self._closed:
            raise InvalidStateError('closed')

        return await self._handler.getTransportStats()

    # Restart ICE connection.
    async def restartIce(self, iceParameters: Union[IceParameters, dict]):
        self._logger.debug('Transport restartIce()')

        if self._closed:
            raise InvalidStateError('closed')
        elif not iceParameters:
            raise TypeError('missing iceParameters')

        if isinstance(iceParameters, dict):
            iceParameters = _parseOptions(IceParameters, **iceParameters)

        return await self._commandQueue.push(
            lambda: self._handler.restartIce(iceParameters), 'restartIce')

    # Update ICE servers.
    async def updateIceServers(self, iceServers: List[RTCIceServer]):
        self._logger.debug('Transport updateIceServers()')

        if self._closed:
            raise InvalidStateError('closed')
        elif not isinstance(iceServers, list):
            raise TypeError('missing iceServers')

        return await self._commandQueue.push(
            lambda: self._handler.updateIceServers(iceServers), 'updateIceServers')

    # Create a Producer.
    async def produce(
        self,
        track: Optional[MediaStreamTrack] = None,
        encodings: Optional[List[Union[RtpEncodingParameters, dict]]] = None,
        codecOptions: Optional[Union[ProducerCodecOptions, dict]] = None,
        codec: Optional[Union[RtpCodecCapability, dict]] = None,
        stopTracks: bool = True,
        disableTrackOnPause: bool = True,
        zeroRtpOnPause: bool = False,
        appData: Optional[dict] = None
    ) -> Producer:
        self._logger.debug(f'Transport produce() [track:{track}]')

        if not track:
            raise TypeError('missing track')
        elif self._direction != 'send':
            raise UnsupportedError('not a sending Transport')
        elif not self._canProduceByKind.get(track.kind):
            raise UnsupportedError(f'cannot produce {track.kind}')
        elif track.readyState == 'ended':
            raise InvalidStateError('track ended')
        elif len(self.listeners('connect')) == 0 and self._connectionState == 'new':
            raise TypeError('no "connect" listener set into this transport')
        elif len(self.listeners('produce')) == 0:
            raise TypeError('no "produce" listener set into this transport')
        elif appData is not None and not isinstance(appData, dict):
            raise TypeError('if given, appData must be a dict')
        elif encodings is not None and not isinstance(encodings, list):
            raise TypeError('encodings must be a list')

        options: ProducerOptions = _parseOptions(
            ProducerOptions,
            track=track,
            encodings=encodings or [],
            codecOptions=codecOptions,
            codec=codec,
            stopTracks=stopTracks,
            disableTrackOnPause=disableTrackOnPause,
            zeroRtpOnPause=zeroRtpOnPause,
            appData=appData if appData is not None else {}
        )

        try:
            return await self._commandQueue.push(lambda: self._produce(options), 'produce')
        except Exception:
            # Stop the given track if the command failed, including when the
            # Transport was closed meanwhile.
            if options.stopTracks:
                track.stop()
            raise

    async def _produce(self, options: ProducerOptions) -> Producer:
        track = options.track

        normalizedEncodings = [_normalizeEncoding(encoding) for encoding in options.encodings]

        handlerSendResult: HandlerSendResult = await self._handler.send(
            track=track,
            encodings=normalizedEncodings,
            codecOptions=options.codecOptions,
            codec=options.codec
        )

        try:
            rtpParameters: RtpParameters = handlerSendResult.rtpParameters

            # This will fill rtpParameters's missing fields with default values.
            validateRtpParameters(rtpParameters)

            ids = await self.emit_for_results(
                'produce',
                track.kind,
                rtpParameters,
                options.appData
            )

            if not ids:
                raise TypeError('"produce" listener did not return a Producer id')

            # Transport closed while the listener was running.
            if self._closed:
                raise InvalidStateError('closed')

            producer = Producer(
                id=ids[0],
                localId=handlerSendResult.localId,
                rtpSender=handlerSendResult.rtpSender,
                track=track,
                rtpParameters=rtpParameters,
                stopTracks=options.stopTracks,
                disableTrackOnPause=options.disableTrackOnPause,
                zeroRtpOnPause=options.zeroRtpOnPause,
                channel=EntityChannel(self, 'producer', ids[0]),
                appData=options.appData,
                loop=self._loop
            )
        except Exception:
            try:
                await self._handler.stopSending(handlerSendResult.localId)
            except Exception as e:
                self._logger.warning(f'Transport produce() | stopSending() failed: {e!r}')
            raise

        self._producers[producer.id] = producer

        # Emit observer event.
        self._observer.emit('newproducer', producer)

        return producer

    # Create a Consumer to consume a remote Producer.
    async def consume(
        self,
        id: str,
        producerId: str,
        kind: MediaKind,
        rtpParameters: Union[RtpParameters, dict],
        streamId: Optional[str] = None,
        appData: Optional[dict] = None
    ) -> Consumer:
        self._logger.debug('Transport consume()')

        if self._closed:
            raise InvalidStateError('closed')
        elif self._direction != 'recv':
            raise UnsupportedError('not a receiving Transport')
        elif not isinstance(id, str) or not id:
            raise TypeError('missing id')
        elif not isinstance(producerId, str) or not producerId:
            raise TypeError('missing producerId')
        elif kind not in ('audio', 'video'):
            raise TypeError(f'invalid kind {kind!r}')
        elif len(self.listeners('connect')) == 0 and self._connectionState == 'new':
            raise TypeError('no "connect" listener set into this transport')
        elif appData is not None and not isinstance(appData, dict):
            raise TypeError('if given, appData must be a dict')

        if isinstance(rtpParameters, dict):
            rtpParameters = _parseOptions(RtpParameters, **rtpParameters)
        elif isinstance(rtpParameters, RtpParameters):
            rtpParameters = rtpParameters.model_copy(deep=True)
        else:
            raise TypeError('missing rtpParameters')

        # Ensure the device can consume it. This validates rtpParameters too.
        if not canReceive(rtpParameters, self._extendedRtpCapabilities):
            raise UnsupportedError('cannot consume this Producer')

        options: ConsumerOptions = ConsumerOptions(
            id=id,
            producerId=producerId,
            kind=kind,
            rtpParameters=rtpParameters,
            streamId=streamId,
            appData=appData if appData is not None else {}
        )

        return await self._consumerScheduler.createConsumer(options)

    def _createConsumer(self, options: ConsumerOptions, result: HandlerReceiveResult) -> Consumer:
        if self._closed:
            raise InvalidStateError('closed')

        consumer = Consumer(
            id=options.id,
            localId=result.localId,
            producerId=options.producerId,
            kind=options.kind,
            track=result.track,
            rtpParameters=options.rtpParameters,
            channel=EntityChannel(self, 'consumer', options.id),
            rtpReceiver=result.rtpReceiver,
            appData=options.appData,
            loop=self._loop
        )

        self._consumers[consumer.id] = consumer

        # Emit observer event.
        self._observer.emit('newconsumer', consumer)

        return consumer

    # Create a DataProducer.
    async def produceData(
        self,
        ordered: Optional[bool] = None,
        maxPacketLifeTime: Optional[int] = None,
        maxRetransmits: Optional[int] = None,
        priority: Priority = 'low',
        label: str = '',
        protocol: str = '',
        appData: Optional[dict] = None
    ) -> DataProducer:
        self._logger.debug('Transport produceData()')

        if self._direction != 'send':
            raise UnsupportedError('not a sending Transport')
        elif not self._maxSctpMessageSize:
            raise UnsupportedError('SCTP not enabled by remote Transport')
        elif priority not in ('very-low', 'low', 'medium', 'high'):
            raise TypeError('wrong priority')
        elif len(self.listeners('connect')) == 0 and self._connectionState == 'new':
            raise TypeError('no "connect" listener set into this transport')
        elif len(self.listeners('producedata')) == 0:
            raise TypeError('no "producedata" listener set into this transport')
        elif appData is not None and not isinstance(appData, dict):
            raise TypeError('if given, appData must be a dict')

        options: DataProducerOptions = _parseOptions(
            DataProducerOptions,
            ordered=ordered,
            maxPacketLifeTime=maxPacketLifeTime,
            maxRetransmits=maxRetransmits,
            priority=priority,
            label=label,
            protocol=protocol,
            appData=appData if appData is not None else {}
        )

        if options.maxPacketLifeTime is not None or options.maxRetransmits is not None:
            options.ordered = False

        return await self._commandQueue.push(lambda: self._produceData(options), 'produceData')

    async def _produceData(self, options: DataProducerOptions) -> DataProducer:
        handlerSendDataChannelResult: HandlerSendDataChannelResult = await self._handler.sendDataChannel(
            ordered=options.ordered,
            maxPacketLifeTime=options.maxPacketLifeTime,
            maxRetransmits=options.maxRetransmits,
            priority=options.priority,
            label=options.label,
            protocol=options.protocol
        )

        sctpStreamParameters = handlerSendDataChannelResult.sctpStreamParameters

        # This will fill sctpStreamParameters's missing fields with default values.
        validateSctpStreamParameters(sctpStreamParameters)

        ids = await self.emit_for_results(
            'producedata',
            sctpStreamParameters=sctpStreamParameters,
            label=options.label,
            protocol=options.protocol,
            appData=options.appData
        )

        if not ids:
            handlerSendDataChannelResult.dataChannel.close()
            raise TypeError('"producedata" listener did not return a DataProducer id')

        # Transport closed while the listener was running.
        if self._closed:
            handlerSendDataChannelResult.dataChannel.close()
            raise InvalidStateError('closed')


        dataProducer = DataProducer(
            id=ids[0],
            dataChannel=handlerSendDataChannelResult.dataChannel,
            sctpStreamParameters=sctpStreamParameters,
            channel=EntityChannel(self, 'dataproducer', ids[0]),
            appData=options.appData,
            loop=self._loop
        )

        self._dataProducers[dataProducer.id] = dataProducer

        # Emit observer event.
        self._observer.emit('newdataproducer', dataProducer)

        return dataProducer

    # Create a DataConsumer.
    async def consumeData(
        self,
        id: str,
        dataProducerId: str,
        sctpStreamParameters: Union[SctpStreamParameters, dict],
        label: str = '',
        protocol: str = '',
        appData: Optional[dict] = None
    ) -> DataConsumer:
        self._logger.debug('Transport consumeData()')

        if self._closed:
            raise InvalidStateError('closed')
        elif self._direction != 'recv':
            raise UnsupportedError('not a receiving Transport')
        elif not self._maxSctpMessageSize:
            raise UnsupportedError('SCTP not enabled by remote Transport')
        elif not isinstance(id, str) or not id:
            raise TypeError('missing id')
        elif not isinstance(dataProducerId, str) or not dataProducerId:
            raise TypeError('missing dataProducerId')
        elif len(self.listeners('connect')) == 0 and self._connectionState == 'new':
            raise TypeError('no "connect" listener set into this transport')
        elif appData is not None and not isinstance(appData, dict):
            raise TypeError('if given, appData must be a dict')

        if isinstance(sctpStreamParameters, dict):
            sctpStreamParameters = _parseOptions(SctpStreamParameters, **sctpStreamParameters)
        elif isinstance(sctpStreamParameters, SctpStreamParameters):
            sctpStreamParameters = sctpStreamParameters.model_copy(deep=True)

        # This may raise.
        validateSctpStreamParameters(sctpStreamParameters)

        options: DataConsumerOptions = DataConsumerOptions(
            id=id,
            dataProducerId=dataProducerId,
            sctpStreamParameters=sctpStreamParameters,
            label=label,
            protocol=protocol,
            appData=appData if appData is not None else {}
        )

        return await self._commandQueue.push(lambda: self._consumeData(options), 'consumeData')

    async def _consumeData(self, options: DataConsumerOptions) -> DataConsumer:
        handlerReceiveDataChannelResult: HandlerReceiveDataChannelResult = await self._handler.receiveDataChannel(
            sctpStreamParameters=options.sctpStreamParameters,
            label=options.label,
            protocol=options.protocol
        )

        if self._closed:
            handlerReceiveDataChannelResult.dataChannel.close()
            raise InvalidStateError('closed')

        dataConsumer: DataConsumer = DataConsumer(

            id=options.id,
            dataProducerId=options.dataProducerId,
            dataChannel=handlerReceiveDataChannelResult.dataChannel,
            sctpStreamParameters=options.sctpStreamParameters,
            channel=EntityChannel(self, 'dataconsumer', options.id),
            appData=options.appData,
            loop=self._loop
        )

        self._dataConsumers[dataConsumer.id] = dataConsumer

        # Emit observer event.
        self._observer.emit('newdataconsumer', dataConsumer)

        return dataConsumer

    # Handle a request sent by an entity through its EntityChannel.
    async def dispatchRequest(self, entityKind: EntityKind, entityId: str, request: BaseModel) -> Any:
        if isinstance(request, CloseRequest):
            self._onEntityClosed(entityKind, entityId)
            return None

        if self._closed:
            raise InvalidStateError('closed')

        if entityKind == 'producer':
            producer = self._producers.get(entityId)
            if not producer:
                raise InvalidStateError(f'Producer not found [id:{entityId}]')

            localId = producer.localId

            if isinstance(request, GetStatsRequest):
                return await self._handler.getSenderStats(localId)
            elif isinstance(request, ReplaceTrackRequest):
                track = request.track
                return await self._commandQueue.push(
                    lambda: self._handler.replaceTrack(localId, track), 'replaceTrack')
            elif isinstance(request, SetMaxSpatialLayerRequest):
                spatialLayer = request.spatialLayer
                return await self._commandQueue.push(
                    lambda: self._handler.setMaxSpatialLayer(localId, spatialLayer), 'setMaxSpatialLayer')
            elif isinstance(request, SetRtpEncodingParametersRequest):
                params = request.params
                return await self._commandQueue.push(
                    lambda: self._handler.setRtpEncodingParameters(localId, params), 'setRtpEncodingParameters')

        elif entityKind == 'consumer':
            consumer = self._consumers.get(entityId)
            if not consumer:
                raise InvalidStateError(f'Consumer not found [id:{entityId}]')

            if isinstance(request, GetStatsRequest):
                return await self._handler.getReceiverStats(consumer.localId)

        raise TypeError(f'unsupported {entityKind} request {type(request).__name__}')

    # Handle a notification sent by an entity through its EntityChannel.
    def dispatchNotification(self, entityKind: EntityKind, entityId: str, request: BaseModel):
        if isinstance(request, CloseRequest):
            self._onEntityClosed(entityKind, entityId)
            return

        if self._closed:
            return

        if entityKind == 'producer' and isinstance(request, ReplaceTrackRequest):
            producer = self._producers.get(entityId)
            if not producer:
                return

            localId = producer.localId
            track = request.track
            future = self._commandQueue.push(
                lambda: self._handler.replaceTrack(localId, track), 'replaceTrack')

            def onReplaceTrackDone(future):
                if not future.cancelled() and future.exception():
                    self._logger.error(
                        f'Transport replaceTrack() failed [producerId:{entityId}]: {future.exception()!r}')

            future.add_done_callback(onReplaceTrackDone)

        elif entityKind == 'consumer' and isinstance(request, (PauseRequest, ResumeRequest)):
            consumer = self._consumers.get(entityId)
            if not consumer:
                return

            if isinstance(request, PauseRequest):
                self._consumerScheduler.pauseConsumer(consumer.id, consumer.localId)
            else:
                self._consumerScheduler.resumeConsumer(consumer.id, consumer.localId)

        else:
            self._logger.warning(
                f'Transport dispatchNotification() | unsupported {entityKind} notification {type(request).__name__}')

    def _onEntityClosed(self, entityKind: EntityKind, entityId: str):
        if entityKind == 'producer':
            producer = self._producers.pop(entityId, None)
            if not producer or self._closed:
                return

            localId = producer.localId
            future = self._commandQueue.push(lambda: self._handler.stopSending(localId), 'stopSending')

            def onStopSendingDone(future):
                if not future.cancelled() and future.exception():
                    self._logger.warning(
                        f'Transport stopSending() failed [producerId:{entityId}]: {future.exception()!r}')

            future.add_done_callback(onStopSendingDone)

        elif entityKind == 'consumer':
            consumer = self._consumers.pop(entityId, None)
            if not consumer or self._closed:
                return

            self._consumerScheduler.closeConsumer(consumer.id, consumer.localId)

        elif entityKind == 'dataproducer':
            self._dataProducers.pop(entityId, None)

        elif entityKind == 'dataconsumer':
            self._dataConsumers.pop(entityId, None)

    def _handleHandler(self):
        handler = self._handler

        @handler.on('@connect')
        async def on_connect(dtlsParameters: DtlsParameters):
            if self._closed:
                raise InvalidStateError('closed')

            return await self.emit_for_results('connect', dtlsParameters)

        @handler.on('@connectionstatechange')
        def on_connectionstatechange(connectionState: ConnectionState):
            if connectionState == self._connectionState:
                return

            self._logger.debug(f'Transport connection state changed to {connectionState}')

            self._connectionState = connectionState

            if not self._closed:
                self.emit('connectionstatechange', connectionState)


def _normalizeEncoding(encoding: RtpEncodingParameters) -> RtpEncodingParameters:
    return RtpEncodingParameters(
        active=encoding.active is not False,
        maxBitrate=encoding.maxBitrate,
        maxFramerate=encoding.maxFramerate,
        scaleResolutionDownBy=encoding.scaleResolutionDownBy,
        dtx=encoding.dtx,
        scalabilityMode=encoding.scalabilityMode,
        priority=encoding.priority,
        networkPriority=encoding.networkPriority
    )
