from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Slack Send Message"
    debug: bool = False
    log_level: str = "INFO"

    # Sent on every outbound request (webhook, chat.postMessage, token exchange)
    user_agent: str = "SGNL-CAEP-Hub/2.0"

    # Per-request transport timeout (seconds)
    http_timeout: float = 15

    # Pause before the single in-process retry of a rate-limited send
    rate_limit_retry_delay: float = 5.0

    max_text_length: int = 4000

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
