from typing import Callable, Dict, List

from axlelib.utils.logger import logger, log_exception


class ChangeFeed:
    """
    Views subscribe here and get called after every commit with the
    collection key and the records written
    """

    def __init__(self):
        self.listeners: Dict[str, List[Callable]] = {}

    def subscribe(self, key: str, listener: Callable) -> Callable:
        self.listeners.setdefault(key, []).append(listener)

        def unsubscribe():
            if listener in self.listeners.get(key, []):
                self.listeners[key].remove(listener)
        return unsubscribe

    def publish(self, key: str, records: List) -> None:
        logger.debug(f'publish ::: {key=}, {len(records)} records, '
                     f'{len(self.listeners.get(key, []))} listeners')
        for listener in list(self.listeners.get(key, [])):
            try:
                listener(key, records)
            except Exception as e:
                log_exception(e, msg=f'publish ::: listener {getattr(listener, "__name__", listener)} failed')
