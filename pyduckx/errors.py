"""
PyDuckX 錯誤處理模組。

提供結構化的異常類別，以及集中式的錯誤處理器。
所有錯誤都會傳遞給呼叫者，處理器只負責記錄與通知。
"""
import functools
import logging
import traceback as tb
from typing import Any, Callable, Dict, List, Optional, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PyDuckXError(Exception):
    """所有 PyDuckX 異常的基礎類。"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.reported = False
        self.traceback = "".join(tb.format_stack(limit=8)[:-1])

    def to_dict(self) -> Dict[str, Any]:
        """
        將錯誤轉換為字典，方便記錄或輸出報告。

        Returns:
            包含錯誤類型、訊息、細節與堆疊的字典
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": dict(self.details),
            "traceback": self.traceback,
        }

    def __str__(self) -> str:
        if not self.details:
            return self.message
        extra = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
        return f"{self.message} ({extra})"


class ConfigurationError(PyDuckXError):
    """配置相關的錯誤，例如 duck 選項格式不正確。"""

    def __init__(self, message: str, component: str, config_key: Optional[str] = None, **kwargs: Any):
        details = {"component": component}
        if config_key is not None:
            details["config_key"] = config_key
        details.update(kwargs)
        super().__init__(message, details)
        self.component = component
        self.config_key = config_key


class SelectorError(PyDuckXError):
    """與 Selector 相關的錯誤。"""

    def __init__(self, message: str, selector_name: Optional[str] = None, input_state: Any = None, **kwargs: Any):
        details: Dict[str, Any] = {}
        if selector_name is not None:
            details["selector_name"] = selector_name
        if input_state is not None:
            details["input_state"] = input_state
        details.update(kwargs)
        super().__init__(message, details)
        self.selector_name = selector_name
        self.input_state = input_state


class ErrorHandler:
    """集中式錯誤處理器，用於捕獲、日誌記錄和錯誤報告。"""

    def __init__(self, log_to_console: bool = True, log_to_file: bool = False, log_file: Optional[str] = None,
                 level: int = logging.ERROR):
        """
        初始化錯誤處理器。

        Args:
            log_to_console: 是否透過 logging 記錄錯誤
            log_to_file: 是否額外寫入日誌檔
            log_file: 日誌檔路徑，log_to_file 為 True 時必須提供
            level: 記錄錯誤時使用的日誌等級
        """
        if log_to_file and not log_file:
            raise ConfigurationError("log_to_file 需要指定 log_file", component="ErrorHandler", config_key="log_file")
        self.log_to_console = log_to_console
        self.log_to_file = log_to_file
        self.log_file = log_file
        self.level = level
        self.handlers: List[Callable[[PyDuckXError], None]] = []
        self._file_logger: Optional[logging.Logger] = None
        if log_to_file:
            self._file_logger = logging.getLogger(f"{__name__}.file.{id(self)}")
            self._file_logger.propagate = False
            self._file_logger.addHandler(logging.FileHandler(log_file, encoding="utf-8"))

    def register_handler(self, handler: Callable[[PyDuckXError], None]) -> None:
        """註冊額外的錯誤回調。"""
        self.handlers.append(handler)

    def unregister_handler(self, handler: Callable[[PyDuckXError], None]) -> None:
        """移除先前註冊的錯誤回調。"""
        if handler in self.handlers:
            self.handlers.remove(handler)

    def handle(self, error: Union[PyDuckXError, Exception]) -> None:
        """
        記錄錯誤並通知所有已註冊的回調。

        非 PyDuckXError 的異常會先包裝成 PyDuckXError。

        Args:
            error: 要處理的錯誤
        """
        if not isinstance(error, PyDuckXError):
            error = PyDuckXError(str(error), {"original_type": error.__class__.__name__})

        if self.log_to_console:
            logger.log(self.level, "%s: %s", error.__class__.__name__, error)
        if self._file_logger is not None:
            self._file_logger.log(self.level, "%s: %s", error.__class__.__name__, error)

        for handler in list(self.handlers):
            handler(error)


# 單例錯誤處理器；錯誤會重新拋給呼叫者，因此只以 DEBUG 記錄
global_error_handler = ErrorHandler(level=logging.DEBUG)


def handle_error(func: Callable[..., T]) -> Callable[..., T]:
    """
    裝飾器：將函式拋出的 PyDuckXError 交給全域錯誤處理器後重新拋出。

    巢狀的被裝飾呼叫（例如 create_duck -> Duck）中，同一個錯誤只回報一次。
    """
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return func(*args, **kwargs)
        except PyDuckXError as err:
            if not err.reported:
                err.reported = True
                global_error_handler.handle(err)
            raise
    return wrapper
