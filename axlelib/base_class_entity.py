from copy import deepcopy
from datetime import datetime
from typing import Dict, Any

from axlelib.constants.substitute_keys import from_db
from axlelib.utils import exceptions
from axlelib.utils.data import substitute_keys, fill_from_template, fix_values
from axlelib.utils.logger import logger


def now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


class EntityBase:
    record_template: Dict = {}

    required_immutable_fields_validation = {}
    required_mutable_fields_validation = {}
    optional_fields_validation = {}

    def __init__(self, id_):
        self.id_: str = id_
        self.record_type: str = ''

    @classmethod
    def init_by_record(cls, record: Dict):
        """
        Builds an entity from a stored record,
        keys missing in older records are filled from the record template
        """
        return cls(**fill_from_template(deepcopy(record), cls.record_template))

    def _to_dict(self) -> Dict:
        """
        Should be re-implemented in each child class
        :return:
        dict of item's attributes
        """
        return {
            'id_': self.id_
        }

    def to_record(self) -> Dict:
        """
        Validated storable copy of the entity
        :return:
        dict ready to be put to a collection
        """
        record = fix_values(self._to_dict())
        self._validate_mandatory_fields(record)
        self._validate_optional_fields(record)
        return record

    def copy(self):
        return deepcopy(self)

    def raise_validation_error(self, key):
        message = f'Validation error occurred while validating {self.record_type} field={key}'
        logger.error(f"raise_validation_error ::: {message}")
        raise exceptions.ValidationException(message)

    def _validate_mandatory_fields(self, record: Dict):
        """
        Validates mandatory fields if all fields have correct type to be stored
        Raise ValidationException in case if a field is not valid
        :return:
        None
        """
        for key, validator_func in {
            **self.required_immutable_fields_validation,
            **self.required_mutable_fields_validation
        }.items():
            if validator_func(record.get(key)) is False:
                self.raise_validation_error(key)

    def _validate_optional_fields(self, record: Dict):
        """
        Validates optional fields, None is always accepted
        :return:
        None
        """
        for key, validator_func in self.optional_fields_validation.items():
            if record.get(key) is not None and validator_func(record.get(key)) is False:
                self.raise_validation_error(key)

    def _to_ui(self) -> Dict:
        item = fix_values(self._to_dict())
        substitute_keys(dict_to_process=item, base_keys=from_db)
        return item

    def to_ui(self) -> Dict[str, Any]:
        return self._to_ui()

    def __eq__(self, other):
        return type(self) is type(other) and self._to_dict() == other._to_dict()

    def __repr__(self):
        return f'{self.__class__.__name__}(id_={self.id_!r})'
