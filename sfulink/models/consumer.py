from typing import Optional
from pydantic import BaseModel

from ..rtp_parameters import MediaKind, RtpParameters


class ConsumerOptions(BaseModel):
    # Server side Consumer id.
    id: str
    # Server side Producer id.
    producerId: str
    kind: MediaKind
    rtpParameters: RtpParameters
    # Stream id used to group tracks for synchronization.
    streamId: Optional[str] = None
    appData: dict = {}
