"""Client-side upload, retry, streaming and download pipeline for the log toolkit services."""
