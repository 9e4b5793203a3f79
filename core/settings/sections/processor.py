from pydantic_settings import SettingsConfigDict

from core.settings.base import OrdersBaseSettings


class ProcessorSettings(OrdersBaseSettings):
    """
    Order processor worker settings.
    Loaded automatically from .env with prefix PROCESSOR_*
    """

    # Batch reading
    batch_size: int = 10
    block_ms: int = 1000
    poll_interval: float = 1.0

    # Redelivery / dead-letter policy
    max_deliveries: int = 3
    claim_idle_ms: int = 30000

    # Triage thresholds
    review_item_threshold: int = 10
    approval_value_threshold: float = 10000

    # Only transition orders that are still PENDING
    require_pending: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PROCESSOR_",
        extra="ignore",
    )
