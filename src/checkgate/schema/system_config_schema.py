from pydantic import BaseModel, ConfigDict, Field, field_validator

from checkgate.model.topic_policy import TopicPolicyModel
from checkgate.schema.notifier_schema import NotifierConfigSchema, RetryConfigSchema
from checkgate.schema.popup_alert_schema import DEFAULT_POPUP_MESSAGE


class PopupConfig(BaseModel):
    """Failure popup configuration"""

    TIMEOUT_SEC: float = Field(default=120.0, gt=0, description="Auto-dismiss delay (seconds)")
    MESSAGE: str = Field(default=DEFAULT_POPUP_MESSAGE, min_length=1)
    PREFERENCE_PATH: str | None = Field(
        default="logs/state/popup_preference.yml", description="Persisted show-popup switch; None keeps it in memory"
    )
    DEFAULT_SHOW_POPUP: bool = Field(default=True, description="Used until the user changes the switch")


class LogConfig(BaseModel):
    LEVEL: str = Field(default="INFO")
    TO_FILE: bool = Field(default=False)
    DIR: str = Field(default="logs")

    @field_validator("LEVEL")
    @classmethod
    def validate_level(cls, v):
        v = v.strip().upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR"):
            raise ValueError(f"LEVEL must be DEBUG, INFO, WARNING or ERROR, got: {v}")
        return v


class SystemConfig(BaseModel):
    """System configuration (full)"""

    model_config = ConfigDict(extra="allow")

    POPUP: PopupConfig = Field(default_factory=PopupConfig)
    PUBSUB: TopicPolicyModel = Field(default_factory=TopicPolicyModel)
    LOG: LogConfig = Field(default_factory=LogConfig)
    NOTIFIERS: NotifierConfigSchema = Field(default_factory=NotifierConfigSchema)
    RETRY: RetryConfigSchema = Field(default_factory=RetryConfigSchema)
