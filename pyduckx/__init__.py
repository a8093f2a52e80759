"""
PyDuckX：可繼承的 reducer 模組（duck）建構工具。

一個 duck 集合了帶命名空間的 action types、常數表、action creators、
reducer 與初始狀態；extend 在不修改父 duck 的前提下疊加新的行為。
"""
import logging

from .errors import (
    PyDuckXError, ConfigurationError, SelectorError,
    ErrorHandler, global_error_handler, handle_error
)
from .actions import Action, create_action
from .duck import Duck, create_duck
from .options import DuckOptions
from .reducers import action_type, chain_reducers, create_reducer, on
from .selectors import Selector, create_selector
from .immutable_utils import AttrMap, to_dict, to_immutable
from .merge import deep_merge, merge_consts, shallow_merge, union_unique

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

# 匯出所有公開 API
__all__ = [
    # Errors
    "PyDuckXError", "ConfigurationError", "SelectorError",
    "ErrorHandler", "global_error_handler", "handle_error",

    # Duck
    "Duck", "create_duck", "DuckOptions",

    # Actions
    "Action", "create_action",

    # Reducers
    "action_type", "chain_reducers", "create_reducer", "on",

    # Selectors
    "Selector", "create_selector",

    # Immutable Utils
    "AttrMap", "to_dict", "to_immutable",

    # Merge Utils
    "deep_merge", "merge_consts", "shallow_merge", "union_unique",
]
