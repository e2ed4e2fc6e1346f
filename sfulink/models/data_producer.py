from typing import Optional
from pydantic import BaseModel

from ..rtp_parameters import Priority


class DataProducerOptions(BaseModel):
    ordered: Optional[bool] = None
    maxPacketLifeTime: Optional[int] = None
    maxRetransmits: Optional[int] = None
    priority: Priority = 'low'
    label: str = ''
    protocol: str = ''
    appData: dict = {}
