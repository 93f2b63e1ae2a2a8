from collections.abc import AsyncIterable, Callable

import httpx

from logpipe.logging.logger import Log
from logpipe.streaming.exceptions import StreamInterruptedError

ProgressListener = Callable[[int], None]


async def reassemble(
    chunks: AsyncIterable[bytes],
    on_progress: ProgressListener | None = None,
) -> bytes:
    """Pull every chunk of a streamed body and join them into one buffer.

    This is a byte-level operation: chunk boundaries carry no meaning and
    may split records anywhere. ``on_progress`` receives the running byte
    count after each non-empty chunk.

    Raises:
        StreamInterruptedError: if the connection fails mid-stream. The
            partial buffer is discarded.
    """
    parts: list[bytes] = []
    received = 0
    try:
        async for chunk in chunks:
            if not chunk:
                continue
            parts.append(chunk)
            received += len(chunk)
            Log.debug(f"Received {received} bytes")
            if on_progress is not None:
                on_progress(received)
    except (httpx.TransportError, httpx.StreamError) as exc:
        Log.warning(f"Stream interrupted after {received} bytes: {exc}")
        parts.clear()
        raise StreamInterruptedError() from exc
    return b"".join(parts)
