from stackvod.core.config import Config
from stackvod.core.service import StackvoService
from stackvod.core.service import StackvoServiceManager
from stackvod.core.unit_types import LifecycleResult
from stackvod.core.unit_types import Unit
from stackvod.core.unit_types import UnitKind
from stackvod.version import get_version

__version__ = get_version()
__all__ = (
    'Config', 'StackvoService', 'StackvoServiceManager',
    'Unit', 'UnitKind', 'LifecycleResult',
)
