from logpipe.artifacts.base import BasePlatform
from logpipe.artifacts.factory import PlatformFactory
from logpipe.config.settings import Settings
from logpipe.pipeline.base import BasePipeline
from logpipe.pipeline.config import PipelineConfig
from logpipe.pipeline.detector import AnomalyDetectorPipeline
from logpipe.pipeline.generator import LogGeneratorPipeline
from logpipe.pipeline.parser import LogParserPipeline
from logpipe.transport.httpx_adapter import HttpxTransport
from logpipe.transport.retry import RetryPolicy
from logpipe.validation.models import ValidationRule


class PipelineFactory:
    """Builds configured pipeline instances from application settings."""

    KINDS: tuple[str, ...] = ("parser", "detector", "generator")

    @classmethod
    def create(
        cls,
        kind: str,
        settings: Settings,
        platform: BasePlatform | None = None,
    ) -> BasePipeline:
        kind = kind.lower()
        if kind not in cls.KINDS:
            raise ValueError(f"Unknown pipeline '{kind}'. Choose from: {list(cls.KINDS)}")
        platform = platform if platform is not None else PlatformFactory.create(settings)
        config = cls.build_config(kind, settings)
        transport = HttpxTransport(
            timeout_seconds=settings.http_timeout_seconds,
            empty_payload_sentinel=config.empty_payload_sentinel,
        )
        if kind == "parser":
            return LogParserPipeline(config, transport, platform)
        if kind == "detector":
            return AnomalyDetectorPipeline(config, transport, platform)
        return LogGeneratorPipeline(config, transport, platform)

    @classmethod
    def build_config(cls, kind: str, settings: Settings) -> PipelineConfig:
        retry_policy = cls._retry_policy(settings)
        if kind == "parser":
            return PipelineConfig(
                endpoint_url=settings.parser_upload_url,
                validation_rule=ValidationRule(
                    extensions=frozenset(settings.parser_allowed_extensions),
                    max_bytes=settings.parser_max_file_size_bytes,
                ),
                retry_policy=retry_policy,
            )
        if kind == "detector":
            base_url = settings.detector_base_url.rstrip("/")
            return PipelineConfig(
                endpoint_url=f"{base_url}/predict",
                validation_rule=ValidationRule(
                    extensions=frozenset(settings.detector_allowed_extensions),
                    max_bytes=settings.detector_max_file_size_bytes,
                ),
                retry_policy=retry_policy,
                download_base_url=base_url,
                empty_payload_sentinel=settings.detector_empty_payload_sentinel or None,
            )
        return PipelineConfig(
            endpoint_url=settings.generator_url,
            retry_policy=retry_policy,
            out_of_band_threshold=settings.generator_out_of_band_threshold,
        )

    @staticmethod
    def _retry_policy(settings: Settings) -> RetryPolicy:
        return RetryPolicy(
            max_retries=settings.retry_max_retries,
            base_delay_seconds=settings.retry_base_delay_ms / 1000,
            multiplier=settings.retry_backoff_multiplier,
        )
