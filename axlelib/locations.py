from decimal import Decimal
from typing import Dict, Protocol

from axlelib.utils import exceptions


class LocationPicker(Protocol):
    def pick_location(self) -> Dict:
        """ {'address': str, 'lat': number, 'lng': number} confirmed by the user """


class StaticLocationPicker:
    """ Picker returning a fixed pin, used by demos and tests """

    def __init__(self, address: str, lat, lng):
        self.address = address
        self.lat = lat
        self.lng = lng

    def pick_location(self) -> Dict:
        return {'address': self.address, 'lat': self.lat, 'lng': self.lng}


def normalize_location(picked: Dict) -> Dict:
    try:
        address = picked['address']
        lat, lng = Decimal(str(picked['lat'])), Decimal(str(picked['lng']))
    except Exception as error:
        raise exceptions.ValidationException(f'picked location is malformed: {picked!r}') from error
    if not isinstance(address, str) or not address.strip():
        raise exceptions.ValidationException('picked location has no address')
    if not lat.is_finite() or not lng.is_finite():
        raise exceptions.ValidationException(f'coordinates are not numbers: {lat}, {lng}')
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        raise exceptions.ValidationException(f'coordinates out of range: {lat}, {lng}')
    return {'address': address.strip(), 'lat': lat, 'lng': lng}
