# pyduckx/immutable_utils.py
from typing import Any, Iterator, Mapping, Optional
from immutables import Map
from pydantic import BaseModel


class AttrMap(Mapping):
    """
    唯讀映射，底層為 immutables.Map，同時支援 `m.KEY` 與 `m["KEY"]` 存取。

    duck 的 types、常數群組、creators 與 selectors 都以 AttrMap 對外公開，
    因此任何持有者都無法原地修改它們。迭代順序與插入順序一致。

    屬性存取時，已存放的公開鍵優先於同名方法：存放了 "get" 的 creators
    以 `m.get()` 呼叫的是該 creator，而非 Mapping.get。庫內部一律以
    `m[key]` 與迭代存取內容，不依賴這些可被遮蔽的方法。
    """
    __slots__ = ('_data', '_keys')

    def __init__(self, data: Optional[Mapping[str, Any]] = None):
        if isinstance(data, AttrMap):
            keys, data = data._keys, data._data
        else:
            data = {key: data[key] for key in data} if data is not None else {}
            keys = tuple(data)
        object.__setattr__(self, '_data', Map(data))
        object.__setattr__(self, '_keys', keys)

    def __getattribute__(self, name: str) -> Any:
        if not name.startswith('_'):
            data = object.__getattribute__(self, '_data')
            if name in data:
                return data[name]
        return object.__getattribute__(self, name)

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._data)

    def __getattr__(self, name: str) -> Any:
        if name in AttrMap.__slots__:
            raise AttributeError(name)
        try:
            return self._data[name]
        except KeyError:
            raise AttributeError(f"'{type(self).__name__}' has no key '{name}'") from None

    def __setattr__(self, name, value):
        raise AttributeError(f"Cannot modify immutable '{type(self).__name__}'")

    def __delattr__(self, name):
        raise AttributeError(f"Cannot modify immutable '{type(self).__name__}'")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mapping):
            return NotImplemented
        return self._as_dict() == {key: other[key] for key in other}

    __hash__ = None

    def __dir__(self):
        return list(super().__dir__()) + [k for k in self._data if isinstance(k, str)]

    def __reduce__(self):
        return (AttrMap, (self._as_dict(),))

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def set(self, key: str, value: Any) -> 'AttrMap':
        """返回加入（或覆寫）一個鍵後的新 AttrMap，原對象不變。"""
        result = object.__new__(AttrMap)
        keys = self._keys if key in self._data else self._keys + (key,)
        object.__setattr__(result, '_data', self._data.set(key, value))
        object.__setattr__(result, '_keys', keys)
        return result

    def to_dict(self) -> dict:
        """返回淺層的普通字典副本，保留鍵的順序。"""
        return self._as_dict()

    def _as_dict(self) -> dict:
        return {key: self._data[key] for key in self._keys}

    def __repr__(self):
        return f"AttrMap({self._as_dict()!r})"


def to_immutable(obj: Any) -> Any:
    """將任何對象轉換為不可變形式 (包括 Pydantic 模型)"""
    if isinstance(obj, BaseModel):
        # Pydantic 模型轉為 Map
        return Map({k: to_immutable(v) for k, v in obj.model_dump().items()})
    elif isinstance(obj, AttrMap):
        return obj
    elif isinstance(obj, dict):
        # 字典轉為 Map
        return Map({k: to_immutable(v) for k, v in obj.items()})
    elif isinstance(obj, list):
        # 列表轉為元組
        return tuple(to_immutable(i) for i in obj)
    elif isinstance(obj, (set, frozenset)):
        # 集合轉為凍結集合
        return frozenset(to_immutable(i) for i in obj)
    # 其他類型直接返回
    return obj


def to_dict(obj: Any) -> Any:
    """將 Map 及其巢狀結構轉換為普通字典"""
    if isinstance(obj, (Map, AttrMap)):
        return {k: to_dict(obj[k]) for k in obj}
    elif isinstance(obj, tuple):
        return [to_dict(i) for i in obj]
    elif isinstance(obj, frozenset):
        return {to_dict(i) for i in obj}
    return obj
