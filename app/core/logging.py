import logging

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    앱 시작 시 한 번 호출. 알 수 없는 레벨 이름은 INFO로 처리
    """
    resolved = getattr(logging, str(level or "INFO").upper(), logging.INFO)
    logging.basicConfig(format=LOG_FORMAT, level=resolved)
    logging.getLogger("app").setLevel(resolved)
