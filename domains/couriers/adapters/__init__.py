from typing import Dict, Type

from ..exceptions import ConfigurationError
from ..models import CarrierId
from .base import CarrierAdapter
from .paperfly import PaperflyAdapter
from .pathao import PathaoAdapter
from .redx import RedxAdapter
from .steadfast import SteadfastAdapter

ADAPTERS: Dict[str, Type[CarrierAdapter]] = {
    CarrierId.PATHAO: PathaoAdapter,
    CarrierId.REDX: RedxAdapter,
    CarrierId.STEADFAST: SteadfastAdapter,
    CarrierId.PAPERFLY: PaperflyAdapter,
}


def get_adapter(config) -> CarrierAdapter:
    """CourierServiceConfig → 어댑터 인스턴스"""
    cls = ADAPTERS.get(getattr(config, "service_id", None))
    if cls is None:
        raise ConfigurationError(
            f"Unsupported courier service: {getattr(config, 'service_id', None)}"
        )
    return cls(config)


__all__ = ["ADAPTERS", "CarrierAdapter", "get_adapter"]
