"""
Persistence adapters.

A storage keeps named collections, each one an ordered list of records.
Reads never raise: a missing, unreadable or malformed collection is reported
as empty so the caller can re-initialize it. Writes raise StorageUnavailable.
"""
from copy import deepcopy
from typing import Dict, List, Callable

from axlelib.constants import keys_structure
from axlelib.constants.constants import STORAGE_NAMESPACE
from axlelib.utils import db as utils_db, exceptions
from axlelib.utils.data import fix_values, is_valid_collection
from axlelib.utils.logger import logger, log_exception


class StorageAdapter:

    def _read(self, key: str):
        """
        Should be re-implemented in each child class
        :return:
        raw stored value of the collection, None if it was never saved
        """
        raise NotImplementedError

    def _write(self, key: str, records: List[Dict]) -> None:
        raise NotImplementedError

    def load_all(self, key: str) -> List[Dict]:
        try:
            records = self._read(key)
        except Exception as error:
            log_exception(error, msg=f'load_all ::: {key=} could not be read, using empty collection')
            return []
        if records is None:
            return []
        if not is_valid_collection(records):
            logger.error(f"load_all ::: {key=} is malformed ({type(records).__name__}), using empty collection")
            return []
        return deepcopy(records)

    def save_all(self, key: str, records: List[Dict]) -> None:
        if not is_valid_collection(records):
            raise exceptions.ValidationException(f'collection {key} must be a list of records')
        try:
            self._write(key, fix_values(records))
        except Exception as error:
            log_exception(error, msg=f'save_all ::: {key=} could not be written')
            raise exceptions.StorageUnavailable(f'collection {key} could not be saved: {error}') from error
        logger.debug(f"save_all ::: {key=} saved, {len(records)} records")

    def initialize_if_empty(self, key: str, defaults: List[Dict]) -> List[Dict]:
        records = self.load_all(key)
        if records:
            return records
        logger.info(f"initialize_if_empty ::: {key=} is empty, seeding {len(defaults)} records")
        self.save_all(key, defaults)
        return self.load_all(key)


class InMemoryStorage(StorageAdapter):

    def __init__(self, initial: Dict[str, List[Dict]] = None):
        self._collections: Dict = deepcopy(initial) if initial else {}

    def _read(self, key):
        return deepcopy(self._collections.get(key))

    def _write(self, key, records):
        self._collections[key] = deepcopy(records)


class DynamoDBStorage(StorageAdapter):
    """
    One DynamoDB item per collection:
    partkey = collections_<namespace>, sortkey = <collection key>, records = [...]
    """

    def __init__(self, namespace: str = STORAGE_NAMESPACE, table: Callable = utils_db.get_gen_table):
        self.namespace = namespace
        self.table = table

    def _get_pk_sk(self, key):
        return keys_structure.collections_pk.format(namespace=self.namespace), \
            keys_structure.collections_sk.format(collection=key)

    def _read(self, key):
        partkey, sortkey = self._get_pk_sk(key)
        try:
            item = utils_db.get_db_item(partkey, sortkey, table=self.table)
        except exceptions.RecordNotFound:
            return None
        return item.get('records')

    def _write(self, key, records):
        partkey, sortkey = self._get_pk_sk(key)
        utils_db.put_db_record({
            'partkey': partkey,
            'sortkey': sortkey,
            'record_type': 'collection',
            'records': records
        }, table=self.table)
