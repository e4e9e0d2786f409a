import os


class Log:
    def __init__(self, config: dict | None = None) -> None:
        log_cfg = (config or {}).get("vecdex", {}).get("logging", {})
        self.LEVEL: str = str(log_cfg.get("level", os.getenv("LOG_LEVEL", "INFO"))).upper()
