import json
from copy import deepcopy
from decimal import Decimal
from typing import Dict, List, Any

from axlelib.utils.logger import CustomJSONEncoder


def replace_dict_key(item, orig_key, new_key):
    if orig_key in item:
        if new_key not in item:
            item[new_key] = item[orig_key]
        del item[orig_key]


def substitute_keys(dict_to_process: dict, base_keys: dict, opt_dict=None):
    if opt_dict is None:
        opt_dict = {}
    all_keys = {**base_keys, **opt_dict}
    for key, val in all_keys.items():
        if val:
            replace_dict_key(dict_to_process, key, val)
        elif key in dict_to_process.keys():
            dict_to_process.pop(key, None)


def to_money(value: Any) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise TypeError(f'{value!r} is not a money amount')
    return Decimal(str(value)).quantize(Decimal('1.00'))


def fix_values(item: Any) -> Any:
    """
    Make a structure storable: floats become Decimal, nested objects are copied
    """
    result = json.dumps(item, cls=CustomJSONEncoder)
    return json.loads(result, parse_float=Decimal)


def fill_from_template(item: Dict, template: Dict) -> Dict:
    """ Add keys missing in a stored record with the template's default values """
    return {**deepcopy(template), **item}


def is_valid_collection(records: Any) -> bool:
    return isinstance(records, list) and all(isinstance(record, dict) for record in records)


def cleanup_dict(item: dict, list_of_values: list):
    """ Remove None fields in dict with. Supports one nesting.  """

    def sub_clean(sub_item):
        return {
            key: value
            for key, value in sub_item.items()
            if value not in list_of_values
        }

    clean = {}
    for k, v in item.items():
        if isinstance(v, dict):
            nested = sub_clean(v)
            if len(nested.keys()) > 0:
                clean[k] = nested
        elif v not in list_of_values:
            clean[k] = v
    return clean


def upsert_record(records: List[Dict], record: Dict, newest_first: bool = False) -> List[Dict]:
    """ Replace the record with the same id_ in full or add it """
    result = list(records)
    for index, existing in enumerate(result):
        if existing.get('id_') == record.get('id_'):
            result[index] = record
            return result
    if newest_first:
        result.insert(0, record)
    else:
        result.append(record)
    return result
