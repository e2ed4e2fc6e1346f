from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from .rtp_parameters import RtpEncodingParameters


EntityKind = Literal['producer', 'consumer', 'dataproducer', 'dataconsumer']


# Requests an entity sends to the Transport that created it.
class CloseRequest(BaseModel):
    pass

class PauseRequest(BaseModel):
    pass

class ResumeRequest(BaseModel):
    pass

class GetStatsRequest(BaseModel):
    pass

class ReplaceTrackRequest(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    # New track, None to stop sending without removing the sender.
    track: Any = None

class SetMaxSpatialLayerRequest(BaseModel):
    spatialLayer: int

class SetRtpEncodingParametersRequest(BaseModel):
    params: RtpEncodingParameters


class EntityChannel:
    """Typed link between an entity and the Transport owning it.

    The dispatcher is the Transport. request() waits for the outcome of the
    request and raises whatever the Transport raised, notify() does not
    wait for anything.
    """
    def __init__(self, dispatcher, entityKind: EntityKind, entityId: str):
        self._dispatcher = dispatcher
        self._entityKind = entityKind
        self._entityId = entityId

    @property
    def entityKind(self) -> EntityKind:
        return self._entityKind

    @property
    def entityId(self) -> str:
        return self._entityId

    async def request(self, request: BaseModel) -> Any:
        return await self._dispatcher.dispatchRequest(self._entityKind, self._entityId, request)

    def notify(self, request: BaseModel):
        self._dispatcher.dispatchNotification(self._entityKind, self._entityId, request)
