from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from schemadb.exceptions import ValidationError
from schemadb.strategy import get_available_dialects, get_strategy_class
from schemadb.strategy import is_supported_dialect

__all__ = [
    'DatabaseOptions',
]


def _get_prop(config: Mapping[str, Any], name: str) -> str:
    value = config.get(name)
    if value is None:
        raise ValidationError(f'configuration property {name} is not defined')
    return value


@dataclass
class DatabaseOptions:
    """Options

    supported driver names: `mysql`, `sqlite`

    `port` of 0 and `timeout` of 0 leave the driver defaults in place.
    """
    drivername: str = 'mysql'
    hostname: str = None
    username: str = None
    password: str = None
    database: str = None
    port: int = 0
    timeout: int = 0
    charset: str = 'utf8'

    def __post_init__(self):
        if not is_supported_dialect(self.drivername):
            available = get_available_dialects()
            raise ValueError(f'drivername must be one of: {available}')
        strategy_cls = get_strategy_class(self.drivername)
        strategy_cls.validate_options(self)

    @classmethod
    def from_properties(cls, config: Mapping[str, Any], prefix: str,
                        with_database: bool = True) -> 'DatabaseOptions':
        """Build MySQL options from flat configuration properties.

        Reads `<prefix>.user`, `<prefix>.passwd`, `<prefix>.host`, the
        optional `<prefix>.portStr` (e.g. ':3306') and, when `with_database`
        is set, `<prefix>.databaseName`.

        Raises
            ValidationError: If a required property is missing
        """
        username = _get_prop(config, f'{prefix}.user')
        password = _get_prop(config, f'{prefix}.passwd')
        hostname = _get_prop(config, f'{prefix}.host')
        database = _get_prop(config, f'{prefix}.databaseName') if with_database else None

        port = 0
        port_str = config.get(f'{prefix}.portStr')
        if port_str:
            try:
                port = int(str(port_str).lstrip(':'))
            except ValueError as e:
                raise ValidationError(f'configuration property {prefix}.portStr is not a port: {port_str}') from e

        return cls(
            drivername='mysql',
            hostname=hostname,
            username=username,
            password=password,
            database=database,
            port=port,
        )
