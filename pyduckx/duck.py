"""
Duck：自包含的 reducer 模組。

一個 duck 集合了帶命名空間的 action types、常數表、action creators、
reducer 與初始狀態。duck 建構後即不可變，extend 會產生疊加了子選項的
新 duck，父 duck 及其所有結構保持不變。
"""
import logging
from typing import Any, Callable, Dict, Mapping, Optional, Union

from .errors import ConfigurationError, handle_error
from .immutable_utils import AttrMap
from .merge import adapt_arity, call_with_arity, merge_consts, shallow_merge, union_unique
from .options import DuckOptions
from .reducers import chain_reducers
from .selectors import resolve_selectors
from .types import CreatorsFactory, InitialStateFactory

logger = logging.getLogger(__name__)

_EMPTY = AttrMap()


def _check_creators(result: Any) -> Dict[str, Callable[..., Any]]:
    """確認 creators 工廠返回的是「名稱 -> 可調用對象」的映射。"""
    if not isinstance(result, Mapping):
        raise ConfigurationError(
            "creators 工廠必須返回映射",
            component="creators",
            received=type(result).__name__,
        )
    checked = {name: result[name] for name in result}
    for name, creator in checked.items():
        if not callable(creator):
            raise ConfigurationError(
                f"creator '{name}' 必須可調用",
                component="creators",
                config_key=name,
            )
    return checked


def _build_creators(factory: Optional[CreatorsFactory], duck: "Duck", parent: AttrMap = _EMPTY) -> AttrMap:
    if factory is None:
        return parent
    return AttrMap(_check_creators(call_with_arity(factory, duck, parent)))


def _selector_map(selectors: Any, duck: "Duck") -> Mapping[str, Any]:
    if selectors is None:
        return {}
    if callable(selectors):
        selectors = call_with_arity(selectors, duck)
        if not isinstance(selectors, Mapping):
            raise ConfigurationError(
                "selectors 工廠必須返回映射",
                component="selectors",
                received=type(selectors).__name__,
            )
    return selectors


def _constant(value: Any) -> Callable[[Any], Any]:
    return lambda duck: value


class Duck:
    """
    不可變的 reducer 模組。

    屬性:
        types: 不含前綴的名稱 -> 完整 type，例如 {"FETCH": "app/users/FETCH"}
        consts: 常數群組名稱 -> {名稱: 名稱}；每個群組也可直接以 duck.<群組> 存取
        creators: creator 名稱 -> action creator
        selectors: 選擇器名稱 -> 選擇器函數
        initial_state: 建構時即解析完成的初始狀態
        reducer: (state, action) -> state，state 為 None 時使用 initial_state

    範例:
        ```python
        users = Duck(
            namespace="app",
            store="users",
            types=["FETCH"],
            consts={"statuses": ["NEW", "LOADED"]},
            initial_state=lambda duck: {"status": duck.statuses.NEW},
            creators=lambda duck: {"fetch": lambda id: {"type": duck.types.FETCH, "id": id}},
            reducer=lambda state, action, duck: (
                {**state, "status": duck.statuses.LOADED}
                if action["type"] == duck.types.FETCH else state
            ),
        )
        ```
    """

    @handle_error
    def __init__(self, options: Any = None, **kwargs: Any):
        """
        依選項建構 duck。

        解析順序固定為 types -> consts -> initial_state -> selectors -> creators -> reducer，
        工廠函數被呼叫時，之前的欄位都已掛在 duck 上。

        Args:
            options: 映射、DuckOptions 或 None
            **kwargs: 直接以關鍵字提供的選項，覆蓋 options 中的同名鍵

        Raises:
            ConfigurationError: 選項格式不正確，或常數群組名稱與 Duck 的屬性同名
        """
        options = DuckOptions.parse(options, **kwargs)
        for group in options.consts:
            if hasattr(Duck, group):
                raise ConfigurationError(
                    f"常數群組名稱 '{group}' 與 duck 屬性衝突",
                    component="options",
                    config_key="consts",
                )
        prefix = options.prefix
        self._set('options', options)
        self._set('namespace', options.namespace)
        self._set('store', options.store)
        self._set('prefix', prefix)

        # 第一階段：不依賴工廠的欄位
        self._set('types', AttrMap({name: prefix + name for name in options.types}))
        self._set('consts', AttrMap({
            group: AttrMap({name: name for name in names})
            for group, names in options.consts.items()
        }))

        # 第二階段：工廠以 duck 本身作為參數
        if callable(options.initial_state):
            initial_state = call_with_arity(options.initial_state, self, None)
        else:
            initial_state = options.initial_state
        self._set('initial_state', initial_state)
        self._set('selectors', resolve_selectors(_selector_map(options.selectors, self)))
        self._set('creators', _build_creators(options.creators, self))
        self._set('_reducer_body', adapt_arity(options.reducer) if options.reducer else None)

        logger.debug(
            "duck %s built: %d types, %d const groups, %d creators",
            prefix or "<root>", len(self.types), len(self.consts), len(self.creators),
        )

    def _set(self, name: str, value: Any) -> None:
        object.__setattr__(self, name, value)

    def __setattr__(self, name, value):
        raise AttributeError(f"Cannot modify immutable '{type(self).__name__}' attribute '{name}'")

    def __delattr__(self, name):
        raise AttributeError(f"Cannot modify immutable '{type(self).__name__}' attribute '{name}'")

    def __getattr__(self, name: str) -> Any:
        # 只有在一般屬性查找失敗時才會進來：常數群組
        consts = self.__dict__.get('consts')
        if consts is not None and name in consts:
            return consts[name]
        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

    def __dir__(self):
        return list(super().__dir__()) + list(self.__dict__.get('consts', ()))

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __repr__(self):
        return (
            f"Duck(namespace={self.namespace!r}, store={self.store!r}, "
            f"types={list(self.types)!r})"
        )

    def reducer(self, state: Any = None, action: Any = None) -> Any:
        """
        處理 action 並返回新狀態。

        Args:
            state: 當前狀態，None 時使用 initial_state
            action: 要處理的 action

        Returns:
            新的狀態；沒有 reducer 主體時原樣返回 state
        """
        if state is None:
            state = self.initial_state
        if self._reducer_body is None:
            return state
        return self._reducer_body(state, action, self)

    @handle_error
    def extend(self, options: Any = None, **kwargs: Any) -> "Duck":
        """
        以本 duck 為父，疊加子選項後產生新的 duck。

        - namespace / store：子選項提供時取代父值，所有繼承的 types 都以新前綴重新命名
        - types：父在前、子的新名稱附加在後
        - consts：同名群組取聯集
        - creators：父 creators 針對新 duck 重新建構，子工廠以 (duck, parent_creators)
          呼叫，同名 creator 由子覆蓋
        - reducer：先執行父主體，再將結果交給子主體
        - initial_state：子工廠收到 (duck, 父 initial_state)；子值直接取代；未提供則原樣繼承父值
        - selectors：依名稱合併，子覆蓋父

        Args:
            options: 映射、DuckOptions、None，或接收父 duck 並返回選項的函數
            **kwargs: 直接以關鍵字提供的子選項

        Returns:
            新的 Duck；本 duck 不受影響

        Raises:
            ConfigurationError: 子選項格式不正確
        """
        if callable(options) and not isinstance(options, (Mapping, DuckOptions)):
            options = options(self)
        child = DuckOptions.parse(options, **kwargs)
        parent = self.options

        effective: Dict[str, Any] = {
            "namespace": child.namespace if child.provided("namespace") else parent.namespace,
            "store": child.store if child.provided("store") else parent.store,
            "types": union_unique(parent.types, child.types),
            "consts": merge_consts(parent.consts, child.consts),
        }

        creators = self._compose_creators(parent.creators, child.creators)
        if creators is not None:
            effective["creators"] = creators

        if child.reducer is None:
            reducer = parent.reducer
        else:
            reducer = chain_reducers(parent.reducer, child.reducer)
        if reducer is not None:
            effective["reducer"] = reducer

        effective["initial_state"] = self._compose_initial_state(child)

        selectors = self._compose_selectors(parent.selectors, child.selectors)
        if selectors is not None:
            effective["selectors"] = selectors

        logger.debug("extending duck %s into %s/%s", self.prefix or "<root>", effective["namespace"], effective["store"])
        return Duck(DuckOptions.parse(effective))

    def _compose_initial_state(self, child: DuckOptions) -> Union[Any, InitialStateFactory]:
        parent_state = self.initial_state
        if not child.provided("initial_state"):
            return _constant(parent_state)
        child_state = child.initial_state
        if callable(child_state):
            return lambda duck: call_with_arity(child_state, duck, parent_state)
        return child_state

    @staticmethod
    def _compose_creators(parent_factory: Optional[CreatorsFactory],
                          child_factory: Optional[CreatorsFactory]) -> Optional[CreatorsFactory]:
        if child_factory is None:
            return parent_factory

        def creators(duck: "Duck") -> Dict[str, Callable[..., Any]]:
            parent_creators = _build_creators(parent_factory, duck)
            child_creators = _check_creators(call_with_arity(child_factory, duck, parent_creators))
            return shallow_merge(parent_creators, child_creators)

        return creators

    @staticmethod
    def _compose_selectors(parent_selectors: Any, child_selectors: Any) -> Any:
        if child_selectors is None:
            return parent_selectors
        if parent_selectors is None:
            return child_selectors
        if not callable(parent_selectors) and not callable(child_selectors):
            return shallow_merge(parent_selectors, child_selectors)
        return lambda duck: shallow_merge(
            _selector_map(parent_selectors, duck),
            _selector_map(child_selectors, duck),
        )


@handle_error
def create_duck(options: Any = None, **kwargs: Any) -> Duck:
    """
    創建一個 Duck。

    Args:
        options: 映射、DuckOptions 或 None
        **kwargs: 直接以關鍵字提供的選項

    Returns:
        新的 Duck 實例
    """
    return Duck(options, **kwargs)
