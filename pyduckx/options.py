"""
duck 選項模型。

DuckOptions 是建立 duck 時唯一的配置來源，所有格式錯誤都會在這裡
轉換為 ConfigurationError，於建構 duck 時同步拋出。
"""
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError
from .merge import union_unique
from .selectors import Selector

# Duck 自身使用的屬性名稱，常數群組不得與之同名
RESERVED_ATTRIBUTES = frozenset({
    "types", "consts", "creators", "reducer", "initial_state", "selectors",
    "options", "namespace", "store", "prefix", "extend",
})


class DuckOptions(BaseModel):
    """
    duck 的宣告式配置。

    屬性:
        namespace: 命名空間，與 store 一起組成 "<namespace>/<store>/" 前綴
        store: store 名稱
        types: 不含前綴的 action 類型名稱
        consts: 常數群組，群組名稱 -> 常數名稱列表
        creators: creators 工廠 (duck, parent_creators) -> {name: creator}
        reducer: reducer 主體 (state, action, duck) -> state
        initial_state: 初始狀態值，或工廠 (duck, parent_initial_state) -> state
        selectors: 選擇器映射，或工廠 (duck) -> 映射
    """
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
        populate_by_name=True,
    )

    namespace: Optional[str] = None
    store: Optional[str] = None
    types: Tuple[str, ...] = ()
    consts: Dict[str, Tuple[str, ...]] = Field(default_factory=dict)
    creators: Optional[Callable[..., Any]] = None
    reducer: Optional[Callable[..., Any]] = None
    initial_state: Any = Field(default=None, alias="initialState")
    selectors: Any = None

    @field_validator("types")
    @classmethod
    def check_types(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        seen = set()
        for name in value:
            if not name:
                raise ValueError("type 名稱不可為空")
            if name in seen:
                raise ValueError(f"重複的 type 名稱: {name}")
            seen.add(name)
        return value

    @field_validator("consts")
    @classmethod
    def check_consts(cls, value: Dict[str, Tuple[str, ...]]) -> Dict[str, Tuple[str, ...]]:
        checked = {}
        for group, names in value.items():
            if not group:
                raise ValueError("常數群組名稱不可為空")
            if group.startswith("_"):
                raise ValueError(f"常數群組名稱 '{group}' 不可以底線開頭")
            if group in RESERVED_ATTRIBUTES:
                raise ValueError(f"常數群組名稱 '{group}' 與 duck 屬性衝突")
            if any(not name for name in names):
                raise ValueError(f"常數群組 '{group}' 含有空名稱")
            checked[group] = union_unique(names)
        return checked

    @field_validator("selectors")
    @classmethod
    def check_selectors(cls, value: Any) -> Any:
        if value is None or callable(value):
            return value
        if not isinstance(value, Mapping):
            raise ValueError("selectors 必須是映射或可調用的工廠")
        checked = {name: value[name] for name in value}
        for name, selector in checked.items():
            if not (isinstance(selector, Selector) or callable(selector)):
                raise ValueError(f"selector '{name}' 必須可調用或為 Selector")
        return checked

    @property
    def prefix(self) -> str:
        """namespace 與 store 都存在時返回 "<namespace>/<store>/"，否則為空字串。"""
        if self.namespace and self.store:
            return f"{self.namespace}/{self.store}/"
        return ""

    def provided(self, name: str) -> bool:
        """判斷某個欄位是否被明確提供（區分「未提供」與「提供 None」）。"""
        return name in self.model_fields_set

    @classmethod
    def parse(cls, options: Any = None, **overrides: Any) -> "DuckOptions":
        """
        將 None、映射或 DuckOptions 解析為 DuckOptions。

        Args:
            options: 原始選項
            **overrides: 覆蓋在 options 之上的鍵值

        Returns:
            驗證過的 DuckOptions

        Raises:
            ConfigurationError: 選項格式不正確
        """
        if isinstance(options, cls):
            if not overrides:
                return options
            data = {name: getattr(options, name) for name in options.model_fields_set}
        elif options is None:
            data = {}
        elif isinstance(options, Mapping):
            data = {key: options[key] for key in options}
        else:
            raise ConfigurationError(
                "duck 選項必須是映射或 DuckOptions",
                component="options",
                received=type(options).__name__,
            )
        data.update(overrides)

        try:
            return cls.model_validate(data)
        except ValidationError as err:
            first = err.errors()[0]
            loc = first.get("loc") or ("options",)
            raise ConfigurationError(
                f"無效的 duck 選項: {first.get('msg')}",
                component="options",
                config_key=str(loc[0]),
                errors=err.errors(include_url=False),
            ) from err
