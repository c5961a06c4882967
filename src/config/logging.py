import logging


def setup_logging(level: str = "INFO", *, component: str = "api") -> None:
    logging.basicConfig(
        level=getattr(logging, (level or "INFO").upper(), logging.INFO),
        format=f"%(asctime)s [%(levelname)s] [{component}] %(message)s",
    )
