from dataclasses import dataclass, field

from logpipe.transport.retry import RetryPolicy
from logpipe.validation.models import ValidationRule


@dataclass(frozen=True)
class PipelineConfig:
    """Everything a pipeline instance needs to know about its endpoint.

    ``out_of_band_threshold`` is expressed in the unit of the pipeline's
    size hint; None keeps every request buffered. ``empty_payload_sentinel``
    is the body the service sends when the uploaded input has no usable rows.
    """

    endpoint_url: str
    validation_rule: ValidationRule | None = None
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)
    out_of_band_threshold: int | None = None
    download_base_url: str | None = None
    empty_payload_sentinel: str | None = None
