from enum import Enum

from logpipe.logging.logger import Log


class TransportStrategy(str, Enum):
    """How a request is carried out.

    BUFFERED requests run in-process and their response is held in memory.
    OUT_OF_BAND requests are handed to the host environment, which renders
    or downloads the response itself; no response object comes back.
    """

    BUFFERED = "buffered"
    OUT_OF_BAND = "out_of_band"


def select_strategy(payload_size_hint: int, threshold: int | None) -> TransportStrategy:
    """Pick the strategy for a payload of ``payload_size_hint`` units.

    The hint is whatever unit ``threshold`` is expressed in (rows for the
    generator, bytes for uploads). Without a threshold everything is buffered.
    """
    if threshold is not None and payload_size_hint >= threshold:
        Log.info(
            f"Payload size {payload_size_hint} reached threshold {threshold}, "
            "using out-of-band submission"
        )
        return TransportStrategy.OUT_OF_BAND
    return TransportStrategy.BUFFERED
