from pydantic import BaseModel

from ..sctp_parameters import SctpStreamParameters


class DataConsumerOptions(BaseModel):
    # Server side DataConsumer id.
    id: str
    # Server side DataProducer id.
    dataProducerId: str
    sctpStreamParameters: SctpStreamParameters
    label: str = ''
    protocol: str = ''
    appData: dict = {}
