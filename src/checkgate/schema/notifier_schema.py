from pydantic import BaseModel, Field, field_validator


class LogNotifierConfig(BaseModel):
    enabled: bool = Field(default=True)
    priority: int = Field(default=10, ge=1, le=10)
    level: str = Field(default="WARNING", description="Log level used for the popup record")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v):
        v = v.strip().upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR"):
            raise ValueError(f"level must be DEBUG, INFO, WARNING or ERROR, got: {v}")
        return v


class WebhookNotifierConfig(BaseModel):
    enabled: bool = Field(default=False)
    priority: int = Field(default=2, ge=1, le=10)
    url: str = Field(default="", description="Endpoint receiving the popup as JSON")
    timeout_sec: float = Field(default=5.0, gt=0)


class TelegramNotifierConfig(BaseModel):
    enabled: bool = Field(default=False)
    priority: int = Field(default=1, ge=1, le=10)
    bot_token: str = Field(default="", description="Telegram bot token")
    chat_id: str = Field(default="", description="Telegram chat/group ID")
    timeout_sec: float = Field(default=5.0, gt=0)
    parse_mode: str = Field(default="HTML")

    @field_validator("parse_mode")
    @classmethod
    def validate_parse_mode(cls, v):
        if v not in ["HTML", "Markdown", "MarkdownV2"]:
            raise ValueError(f"parse_mode must be HTML, Markdown, or MarkdownV2, got: {v}")
        return v

    @field_validator("chat_id", mode="before")
    @classmethod
    def convert_chat_id_to_str(cls, v):
        if isinstance(v, int):
            return str(v)
        return v


class NotifierConfigSchema(BaseModel):
    log: LogNotifierConfig = Field(default_factory=LogNotifierConfig)
    webhook: WebhookNotifierConfig = Field(default_factory=WebhookNotifierConfig)
    telegram: TelegramNotifierConfig = Field(default_factory=TelegramNotifierConfig)


class RetryConfigSchema(BaseModel):
    max_attempts: int = Field(default=3, ge=1, le=10, description="Maximum attempts per notifier")
    backoff_base_sec: float = Field(default=1.0, ge=0, description="Base backoff time in seconds")
    backoff_multiplier: float = Field(default=2.0, ge=1.0, description="Backoff multiplier")
